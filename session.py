"""
session.py - Starting, stopping and reporting on timers

Each class is either idle (no running timer) or active (exactly one
running timer). start moves a class from idle to active; stop moves it
back and files the timer in the history; cancel moves it back and throws
the timer away.

Nothing here prints. The functions take the Store they work on, change
it or pick timers out of it, and hand results back to the CLI.
"""

from datetime import timedelta
from typing import NamedTuple, Optional

from errors import AlreadyActive, NotActive
from logger import get_logger
from models import Class, Timer, all_classes
from store import Store

log = get_logger("session")


class Shown(NamedTuple):
    """A timer picked for display, and whether it is still running."""

    timer: Timer
    active: bool


# =============================================================================
# STATE CHANGES
# =============================================================================

def start(store: Store, class_: Class) -> Timer:
    """
    Start a timer for a class.

    Raises:
        AlreadyActive: the class already has a running timer
    """
    if store.get_active(class_) is not None:
        raise AlreadyActive(class_)

    timer = Timer(class_)
    timer.mark_start()
    store.insert_active(timer)
    log.info("Started %s at %s", class_, timer.start.isoformat())
    return timer


def stop(store: Store, class_: Class) -> Timer:
    """
    Stop the running timer for a class and add it to the history.

    Raises:
        NotActive: the class has no running timer
    """
    timer = store.get_active(class_)
    if timer is None:
        raise NotActive(class_)

    timer.mark_end()
    store.append_historical(timer)
    store.remove_active(class_)
    log.info("Stopped %s at %s", class_, timer.end.isoformat())
    return timer


def cancel(store: Store, class_: Class) -> Timer:
    """
    Throw away the running timer for a class without recording it.

    Raises:
        NotActive: the class has no running timer
    """
    timer = store.remove_active(class_)
    if timer is None:
        raise NotActive(class_)

    log.info("Cancelled %s timer started at %s", class_, timer.start.isoformat())
    return timer


# =============================================================================
# SELECTION
# =============================================================================

def select_class(
    store: Store,
    class_: Class,
    previous: Optional[int] = None,
    active_only: bool = False,
) -> list[Shown]:
    """
    Pick the most recent timers for one class, newest first.

    The running timer (if any) comes first and counts toward the limit.
    The limit is `previous` entries, or 1 when not given; previous=2 on a
    class with history A, B, C gives C then B.

    Args:
        store: Store to read from
        class_: Which class to look at
        previous: How many entries to return in total
        active_only: Only consider the running timer
    """
    limit = max(previous or 1, 1)
    picked = []

    active = store.get_active(class_)
    if active is not None:
        picked.append(Shown(active, True))

    if active_only:
        return picked

    for timer in store.iter_historical_newest_first():
        if len(picked) >= limit:
            break
        if timer.class_ is class_:
            picked.append(Shown(timer, False))

    return picked


def select_latest(store: Store, active_only: bool = False) -> list[Shown]:
    """
    Pick the most recent timer for every class.

    Running timers come first, in class order. Then the history is walked
    from newest to oldest and the first timer seen for each remaining
    class is taken. A class never shows up twice, and the walk stops as
    soon as all the named classes are covered.
    """
    picked = []
    seen = set()

    for class_ in Class:
        timer = store.get_active(class_)
        if timer is not None:
            picked.append(Shown(timer, True))
            seen.add(class_)

    if active_only:
        return picked

    named = set(all_classes())
    for timer in store.iter_historical_newest_first():
        if named <= seen:
            break
        if timer.class_ not in seen:
            picked.append(Shown(timer, False))
            seen.add(timer.class_)

    return picked


def sum_durations(store: Store) -> timedelta:
    """
    Total time across the latest timer of each class.

    Uses the same picks as select_latest, so a running timer counts
    instead of that class's history. Any timer whose duration can't be
    computed (no start, clock skew) aborts the whole sum.
    """
    total = timedelta()
    for shown in select_latest(store):
        total += shown.timer.elapsed()
    return total


def list_classes() -> list[Class]:
    return all_classes()
