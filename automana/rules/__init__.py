"""Automana rules — the rule builder and its stage factories."""

from automana.rules.gates import (  # noqa: F401
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
    WEEK_DAYS,
    WEEKEND_DAYS,
)
from automana.rules.linkify import fix_unlinked_urls, has_unlinked_url  # noqa: F401
from automana.rules.rule import Rule  # noqa: F401

__all__ = [
    "Rule",
    "fix_unlinked_urls",
    "has_unlinked_url",
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    "WEEK_DAYS",
    "WEEKEND_DAYS",
]
