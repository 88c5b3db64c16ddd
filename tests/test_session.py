"""Tests for session.py: the start/stop/cancel state machine and the show/sum picks."""

import unittest
from datetime import datetime, timedelta

import session
from errors import AlreadyActive, ClockSkew, NoStartTime, NotActive
from models import CLASS_NUM, Class, Timer, all_classes
from store import Store

BASE = datetime(2026, 10, 17, 9, 0, 0)


def closed(class_, hours_after, minutes):
    start = BASE + timedelta(hours=hours_after)
    return Timer(class_, start=start, end=start + timedelta(minutes=minutes))


class TestStateMachine(unittest.TestCase):

    def setUp(self):
        self.store = Store()

    def test_start_makes_class_active(self):
        timer = session.start(self.store, Class.PHYSICS)
        self.assertIs(self.store.get_active(Class.PHYSICS), timer)
        self.assertTrue(timer.is_active)
        self.assertEqual(self.store.historical, [])

    def test_start_twice_is_refused(self):
        for class_ in Class:
            first = session.start(self.store, class_)
            with self.assertRaises(AlreadyActive):
                session.start(self.store, class_)
            self.assertIs(self.store.get_active(class_), first)
            self.assertIsNone(first.end)

    def test_stop_or_cancel_without_start(self):
        self.store.append_historical(closed(Class.CALC, 0, 10))
        for class_ in Class:
            with self.assertRaises(NotActive):
                session.stop(self.store, class_)
            with self.assertRaises(NotActive):
                session.cancel(self.store, class_)
        self.assertEqual(len(self.store.historical), 1)

    def test_start_then_stop_records_history(self):
        session.start(self.store, Class.CHEM)
        timer = session.stop(self.store, Class.CHEM)

        self.assertEqual(self.store.historical, [timer])
        self.assertIs(timer.class_, Class.CHEM)
        self.assertGreaterEqual(timer.end, timer.start)
        self.assertNotIn(Class.CHEM, self.store.active)

    def test_stop_appends_at_tail(self):
        self.store.append_historical(closed(Class.CALC, 0, 10))
        session.start(self.store, Class.ECON)
        timer = session.stop(self.store, Class.ECON)
        self.assertIs(self.store.historical[-1], timer)

    def test_start_then_cancel_discards(self):
        self.store.append_historical(closed(Class.CALC, 0, 10))
        session.start(self.store, Class.HEALTH)
        session.cancel(self.store, Class.HEALTH)

        self.assertEqual(len(self.store.historical), 1)
        self.assertNotIn(Class.HEALTH, self.store.active)

    def test_classes_run_independently(self):
        session.start(self.store, Class.CALC)
        session.start(self.store, Class.CHEM)
        session.stop(self.store, Class.CALC)
        self.assertIn(Class.CHEM, self.store.active)
        self.assertNotIn(Class.CALC, self.store.active)

    def test_can_restart_after_stop(self):
        session.start(self.store, Class.STATS)
        session.stop(self.store, Class.STATS)
        session.start(self.store, Class.STATS)
        self.assertIn(Class.STATS, self.store.active)


class TestSelectClass(unittest.TestCase):

    def setUp(self):
        self.store = Store()
        self.a = closed(Class.PHYSICS, 0, 10)
        self.b = closed(Class.PHYSICS, 1, 20)
        self.other = closed(Class.CALC, 2, 5)
        self.c = closed(Class.PHYSICS, 3, 30)
        for t in (self.a, self.b, self.other, self.c):
            self.store.append_historical(t)

    def timers(self, picked):
        return [s.timer for s in picked]

    def test_default_is_latest_only(self):
        picked = session.select_class(self.store, Class.PHYSICS)
        self.assertEqual(self.timers(picked), [self.c])
        self.assertFalse(picked[0].active)

    def test_previous_two(self):
        picked = session.select_class(self.store, Class.PHYSICS, previous=2)
        self.assertEqual(self.timers(picked), [self.c, self.b])

    def test_previous_more_than_history(self):
        picked = session.select_class(self.store, Class.PHYSICS, previous=10)
        self.assertEqual(self.timers(picked), [self.c, self.b, self.a])

    def test_active_first_and_counted(self):
        running = session.start(self.store, Class.PHYSICS)
        picked = session.select_class(self.store, Class.PHYSICS, previous=2)
        self.assertEqual(self.timers(picked), [running, self.c])
        self.assertEqual([s.active for s in picked], [True, False])

    def test_active_only(self):
        self.assertEqual(
            session.select_class(self.store, Class.PHYSICS, active_only=True), []
        )
        running = session.start(self.store, Class.PHYSICS)
        picked = session.select_class(
            self.store, Class.PHYSICS, previous=3, active_only=True
        )
        self.assertEqual(self.timers(picked), [running])

    def test_no_entries(self):
        self.assertEqual(session.select_class(self.store, Class.ENGLISH), [])


class TestSelectLatest(unittest.TestCase):

    def test_one_per_class_newest_wins(self):
        store = Store()
        old_calc = closed(Class.CALC, 0, 10)
        chem = closed(Class.CHEM, 1, 10)
        new_calc = closed(Class.CALC, 2, 10)
        for t in (old_calc, chem, new_calc):
            store.append_historical(t)

        picked = session.select_latest(store)
        self.assertEqual([s.timer for s in picked], [new_calc, chem])

    def test_active_takes_precedence(self):
        store = Store()
        store.append_historical(closed(Class.CALC, 0, 10))
        chem = closed(Class.CHEM, 1, 10)
        store.append_historical(chem)
        running = session.start(store, Class.CALC)

        picked = session.select_latest(store)
        self.assertEqual([s.timer for s in picked], [running, chem])
        self.assertEqual([s.active for s in picked], [True, False])

    def test_actives_in_class_order(self):
        store = Store()
        english = session.start(store, Class.ENGLISH)
        health = session.start(store, Class.HEALTH)
        picked = session.select_latest(store, active_only=True)
        self.assertEqual([s.timer for s in picked], [health, english])

    def test_active_only_skips_history(self):
        store = Store()
        store.append_historical(closed(Class.CALC, 0, 10))
        self.assertEqual(session.select_latest(store, active_only=True), [])

    def test_stops_once_every_named_class_seen(self):
        store = Store()
        # An Other entry older than a full set of named classes is never reached
        store.append_historical(closed(Class.OTHER, 0, 10))
        for i, class_ in enumerate(all_classes()):
            store.append_historical(closed(class_, i + 1, 10))

        picked = session.select_latest(store)
        self.assertEqual(len(picked), CLASS_NUM)
        self.assertNotIn(Class.OTHER, [s.timer.class_ for s in picked])

    def test_other_shown_once(self):
        store = Store()
        store.append_historical(closed(Class.OTHER, 0, 10))
        newest_other = closed(Class.OTHER, 1, 10)
        store.append_historical(newest_other)
        picked = session.select_latest(store)
        self.assertEqual([s.timer for s in picked], [newest_other])


class TestSumDurations(unittest.TestCase):

    def test_two_half_hours(self):
        store = Store()
        store.append_historical(closed(Class.CALC, 0, 30))
        store.append_historical(closed(Class.CHEM, 1, 30))
        self.assertEqual(session.sum_durations(store), timedelta(hours=1))

    def test_only_latest_per_class_counts(self):
        store = Store()
        store.append_historical(closed(Class.CALC, 0, 30))
        store.append_historical(closed(Class.CALC, 1, 15))
        self.assertEqual(session.sum_durations(store), timedelta(minutes=15))

    def test_empty_store(self):
        self.assertEqual(session.sum_durations(Store()), timedelta(0))

    def test_active_counts_instead_of_history(self):
        store = Store()
        store.append_historical(closed(Class.CALC, 0, 30))
        store.insert_active(Timer(Class.CALC, start=datetime.now() - timedelta(minutes=2)))
        total = session.sum_durations(store)
        self.assertGreaterEqual(total, timedelta(minutes=2))
        self.assertLess(total, timedelta(minutes=3))

    def test_clock_skew_aborts(self):
        store = Store()
        store.append_historical(closed(Class.CALC, 0, 30))
        store.append_historical(Timer(Class.CHEM, start=BASE, end=BASE - timedelta(seconds=1)))
        with self.assertRaises(ClockSkew):
            session.sum_durations(store)

    def test_missing_start_aborts(self):
        store = Store()
        store.insert_active(Timer(Class.CHEM))
        with self.assertRaises(NoStartTime):
            session.sum_durations(store)


class TestListClasses(unittest.TestCase):

    def test_named_classes_in_order(self):
        self.assertEqual(session.list_classes(), all_classes())
        self.assertEqual(len(session.list_classes()), CLASS_NUM)


if __name__ == "__main__":
    unittest.main()
