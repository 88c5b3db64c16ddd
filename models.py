"""
models.py - Data structures for the time tracker

Dataclasses are Python's clean way to define "just data" objects.
A Timer is one tracked block of time for a class; the Class enum is the
fixed list of things you can track time against.
"""

# dataclasses: Python 3.7+ feature for clean data containers
# enum: fixed sets of named values
# Optional: Type hint meaning "this can be None"
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from errors import ClockSkew, NoStartTime


# Number of real classes (everything except the Other catch-all)
CLASS_NUM = 7


class Class(Enum):
    """
    A task category that a timer is tagged with.

    The value of each member is its display name, which is also what gets
    written to the JSON file. Other catches anything we don't recognize.
    """

    HEALTH = "Health"
    PHYSICS = "Physics"
    ECON = "Econ"
    STATS = "Stats"
    CALC = "Calc"
    CHEM = "Chem"
    ENGLISH = "English"
    OTHER = "Other"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Class":
        """
        Turn user text into a Class, ignoring case.

        Never fails: "PHYSICS" and "physics" both give Class.PHYSICS,
        "basket weaving" gives Class.OTHER.
        """
        wanted = text.strip().lower()
        for member in all_classes():
            if member.value.lower() == wanted:
                return member
        return cls.OTHER


def all_classes() -> list[Class]:
    """The named classes in declaration order, without Other."""
    return [c for c in Class if c is not Class.OTHER]


def now() -> datetime:
    """
    Current local time with its UTC offset attached.

    The offset is what makes subtraction correct across daylight saving
    changes: 01:10 EST minus 01:30 EDT is 40 minutes, not -20.
    """
    return datetime.now().astimezone()


def format_duration(span: timedelta) -> str:
    """
    Human-readable duration string.

    Returns strings like "1h 1m 1s" or "1m 30s". The hours part only shows
    up once the span reaches a full hour. Fractions of a second are dropped.
    """
    total_secs = int(span.total_seconds())
    if total_secs < 0:
        raise ClockSkew(span=span)

    # // is integer division (floor division)
    # % is modulo (remainder)
    hours = total_secs // 3600
    minutes = (total_secs // 60) % 60
    seconds = total_secs % 60

    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    return f"{minutes}m {seconds}s"


@dataclass
class Timer:
    """
    Represents a single tracked time block for one class.

    start is None until the timer is started. end stays None while the
    timer is running and gets stamped when it stops. A timer with both
    set is finished and belongs in the history.
    """

    class_: Class                          # "class" is a Python keyword
    start: Optional[datetime] = None       # When the timer started
    end: Optional[datetime] = None         # When the timer stopped (None = still active)

    def __post_init__(self):
        # Naive times are local wall-clock times; pin them to the local offset
        # so they compare and subtract correctly against aware ones
        if self.start is not None and self.start.tzinfo is None:
            self.start = self.start.astimezone()
        if self.end is not None and self.end.tzinfo is None:
            self.end = self.end.astimezone()

    @property
    def is_active(self) -> bool:
        """A timer is "active" if it has started but not ended."""
        return self.start is not None and self.end is None

    def mark_start(self):
        self.start = now()

    def mark_end(self):
        self.end = now()

    def elapsed(self) -> timedelta:
        """
        How long this timer ran (or has been running so far).

        Raises:
            NoStartTime: the timer was never started
            ClockSkew: the end is earlier than the start
        """
        if self.start is None:
            raise NoStartTime(self.class_)

        # If the timer is still active, measure against current time
        end = self.end if self.end is not None else now()
        if end < self.start:
            raise ClockSkew(start=self.start, end=end)
        return end - self.start

    def render(self) -> str:
        """Formatted elapsed time, or "" for a timer that never started."""
        if self.start is None:
            return ""
        return format_duration(self.elapsed())

    def to_dict(self) -> dict:
        """Record stored in the JSON document."""
        return {
            "class": self.class_.value,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Timer":
        """
        Rebuild a Timer from its JSON record.

        fromisoformat() is the inverse of isoformat(), so timestamps come
        back exactly as they were written, offset included. Records from
        before offsets were stored are read as local time. Bad input raises KeyError,
        TypeError or ValueError; the store decides what to do about it.
        """
        start = data["start"]
        end = data["end"]
        return cls(
            class_=Class.parse(data["class"]),
            start=datetime.fromisoformat(start) if start is not None else None,
            end=datetime.fromisoformat(end) if end is not None else None,
        )
