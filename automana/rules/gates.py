"""
Time gates — wall-clock preconditions for a rule iteration.

Each factory returns a gate: a callable taking the workspace client and
returning True to let the iteration proceed. Zone and time strings are
parsed on every evaluation, so a bad value fails the iteration (and every
following one) rather than the process.
"""

from __future__ import annotations

from calendar import FRIDAY, MONDAY, SATURDAY, SUNDAY, THURSDAY, TUESDAY, WEDNESDAY
from datetime import datetime, time
from typing import Callable, Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from automana.engine.errors import AutomanaGateError

Gate = Callable[..., bool]

WEEK_DAYS = [MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY]
WEEKEND_DAYS = [SATURDAY, SUNDAY]

__all__ = [
    "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY",
    "WEEK_DAYS", "WEEKEND_DAYS", "Gate", "when_between", "when_day_of_week",
]


def _now(tz: ZoneInfo) -> datetime:
    return datetime.now(tz)


def _load_zone(tz: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise AutomanaGateError(f"Unknown time zone '{tz}'", stage="gate") from e


def _parse_time(value: str) -> time:
    try:
        parsed = time.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise AutomanaGateError(f"Invalid time of day '{value}'", stage="gate") from e
    if parsed.tzinfo is not None:
        # The zone comes from the gate, not the time string.
        raise AutomanaGateError(f"Time of day '{value}' must not carry an offset", stage="gate")
    return parsed


def in_window(now: time, start: time, end: time) -> bool:
    """
    Half-open [start, end) check on time of day. An end before the start
    wraps past midnight.
    """
    if end < start:
        return now >= start or now < end
    return start <= now < end


def when_between(tz: str, start: str, end: str) -> Gate:
    def gate(wc) -> bool:
        loc = _load_zone(tz)
        s = _parse_time(start)
        e = _parse_time(end)
        now = _now(loc).time()
        return in_window(now, s, e)

    return gate


def when_day_of_week(tz: str, days: Iterable[int]) -> Gate:
    allowed = frozenset(days)

    def gate(wc) -> bool:
        loc = _load_zone(tz)
        return _now(loc).weekday() in allowed

    return gate
