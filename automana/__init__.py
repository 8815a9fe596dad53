"""
Automana — periodic rule automation for Asana.

A rule is declared once with a fluent builder and then evaluated forever by
its own worker: time gates, a task search built by query mutators, task
filters, and task actors.

    from automana import RuleRegistry, WEEK_DAYS, loop

    registry = RuleRegistry()
    registry.in_workspace("Acme") \\
        .when_day_of_week("Europe/London", WEEK_DAYS) \\
        .in_my_tasks_sections("Inbox") \\
        .only_incomplete() \\
        .with_unlinked_url() \\
        .fix_unlinked_url()
    loop(registry)
"""

__version__ = "1.0.0"

from automana.process import RuleRegistry, RuleScheduler, load_rules, loop  # noqa: E402,F401
from automana.rules import (  # noqa: E402,F401
    FRIDAY,
    MONDAY,
    SATURDAY,
    SUNDAY,
    THURSDAY,
    TUESDAY,
    WEDNESDAY,
    WEEK_DAYS,
    WEEKEND_DAYS,
    Rule,
)

__all__ = [
    "RuleRegistry",
    "RuleScheduler",
    "Rule",
    "load_rules",
    "loop",
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
