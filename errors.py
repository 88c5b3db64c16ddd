"""
errors.py - Everything that can go wrong while tracking time

All of these derive from TimeTrackError, so the CLI can catch one type
and print a single "Application error" message. Code that needs to react
to a specific failure catches the subclass instead of matching on text.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional


class TimeTrackError(Exception):
    """Base class for every error the time tracker raises on purpose."""


class AlreadyActive(TimeTrackError):
    """A timer was started for a class that already has one running."""

    def __init__(self, class_):
        self.class_ = class_
        super().__init__(f"a timer for {class_} is already running")


class NotActive(TimeTrackError):
    """stop or cancel was asked for a class with no running timer."""

    def __init__(self, class_):
        self.class_ = class_
        super().__init__(f"no active timer for {class_}")


class NoStartTime(TimeTrackError):
    """A duration was requested from a timer that was never started."""

    def __init__(self, class_=None):
        self.class_ = class_
        label = f" for {class_}" if class_ is not None else ""
        super().__init__(f"timer{label} has no start time")


class ClockSkew(TimeTrackError):
    """The end of a time span comes before its start."""

    def __init__(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        span: Optional[timedelta] = None,
    ):
        self.start = start
        self.end = end
        if span is None and start is not None and end is not None:
            span = end - start
        self.span = span
        if start is not None and end is not None:
            detail = f"end {end.isoformat()} is before start {start.isoformat()}"
        else:
            detail = f"negative duration {span}"
        super().__init__(f"clock skew: {detail}")


class PersistenceError(TimeTrackError):
    """The times file could not be read or written."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
