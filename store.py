"""
store.py - Persistence layer for the time tracker

The whole state of the tracker is one small JSON document: the list of
finished timers (oldest first) and the timers that are running right now,
one per class at most. It is read in full when a command starts and
written back in full when the command is done.

Loading is best-effort. A missing, empty or unreadable file means "start
fresh" and the old contents are lost the next time we save. Pass
strict=True to get a PersistenceError instead.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from errors import PersistenceError
from logger import get_logger
from models import Class, Timer

log = get_logger("store")


@dataclass
class Store:
    """
    In-memory copy of the times file.

    historical: finished timers, appended at the end as they stop
    active: running timers keyed by class
    """

    historical: list[Timer] = field(default_factory=list)
    active: dict[Class, Timer] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Active timers
    # -------------------------------------------------------------------------

    def get_active(self, class_: Class) -> Optional[Timer]:
        return self.active.get(class_)

    def insert_active(self, timer: Timer):
        self.active[timer.class_] = timer

    def remove_active(self, class_: Class) -> Optional[Timer]:
        return self.active.pop(class_, None)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def append_historical(self, timer: Timer):
        self.historical.append(timer)

    def iter_historical_newest_first(self) -> Iterator[Timer]:
        # reversed() walks the list backwards without copying it
        return reversed(self.historical)

    # -------------------------------------------------------------------------
    # JSON conversion
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "historical": [t.to_dict() for t in self.historical],
            "active": {c.value: t.to_dict() for c, t in self.active.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Store":
        """
        Build a Store from a parsed document, checking it as we go.

        Raises ValueError when the document breaks the store's rules: a
        finished timer without an end, a running timer without a start, or
        a running timer filed under the wrong class.
        """
        if not isinstance(data, dict):
            raise ValueError("document is not a JSON object")

        historical = []
        for record in data["historical"]:
            timer = Timer.from_dict(record)
            if timer.start is None or timer.end is None:
                raise ValueError("historical timer is missing a start or end time")
            historical.append(timer)

        active = {}
        for name, record in data["active"].items():
            timer = Timer.from_dict(record)
            if Class.parse(name) is not timer.class_:
                raise ValueError(f"active timer under {name!r} belongs to {timer.class_}")
            if not timer.is_active:
                raise ValueError(f"active timer for {timer.class_} is not running")
            active[timer.class_] = timer

        return cls(historical=historical, active=active)


def load(path: Path, strict: bool = False) -> Store:
    """
    Read the store from disk.

    Args:
        path: Location of the JSON document
        strict: Raise PersistenceError on a corrupt document instead of
            starting over with an empty store

    A missing file is always an empty store, strict or not; that is just
    the first run on a new machine.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.info("No times file at %s, starting fresh", path)
        return Store()
    except UnicodeDecodeError as exc:
        return _corrupt(path, f"not valid UTF-8 ({exc})", strict)
    except OSError as exc:
        raise PersistenceError(path, f"could not read file: {exc.strerror or exc}") from exc

    try:
        store = Store.from_dict(json.loads(text))
    except json.JSONDecodeError as exc:
        return _corrupt(path, f"invalid JSON ({exc})", strict)
    except RecursionError:
        return _corrupt(path, "JSON nested too deeply", strict)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        return _corrupt(path, f"malformed document ({exc!r})", strict)

    log.debug(
        "Loaded %d historical and %d active timers from %s",
        len(store.historical), len(store.active), path,
    )
    return store


def _corrupt(path: Path, reason: str, strict: bool) -> Store:
    if strict:
        raise PersistenceError(path, reason)
    log.warning("Discarding unreadable times file %s: %s", path, reason)
    return Store()


def save(store: Store, path: Path):
    """
    Write the whole store to disk, creating the folder if needed.

    Raises:
        PersistenceError: the folder or file could not be created or written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(store.to_dict(), f, indent=2)
    except OSError as exc:
        raise PersistenceError(path, f"could not write file: {exc.strerror or exc}") from exc

    log.debug(
        "Saved %d historical and %d active timers to %s",
        len(store.historical), len(store.active), path,
    )
