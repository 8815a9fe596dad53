"""
Query mutators — stages that constrain a rule's task search.

Each factory returns ``mutator(wc, query) -> None``. List constraints
accumulate; a scalar constraint set by two mutators of the same rule is a
configuration error, raised every iteration rather than silently
overwritten.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Sequence

from automana.client.query import SearchQuery
from automana.engine.errors import AutomanaConfigError

QueryMutator = Callable[..., None]


def _today() -> date:
    return date.today()


def _claim(q: SearchQuery, field: str, label: str) -> None:
    if getattr(q, field) is not None:
        raise AutomanaConfigError(f"Multiple clauses set {label}", field=field, stage="query")


def in_my_tasks_sections(names: Sequence[str]) -> QueryMutator:
    """Assigned to the caller and sitting in one of the named My Tasks sections."""

    def mutator(wc, q: SearchQuery) -> None:
        me = wc.get_me()
        q.assignee_any.append(me)

        utl = wc.get_my_user_task_list()
        secs_by_name = wc.get_sections_by_name(utl)

        for name in names:
            sec = secs_by_name.get(name)
            if sec is None:
                raise AutomanaConfigError(f"Section '{name}' not found", name=name, stage="query")
            q.sections_any.append(sec)

    return mutator


def _due_in(field: str, label: str, days: int) -> QueryMutator:
    def mutator(wc, q: SearchQuery) -> None:
        _claim(q, field, label)
        setattr(q, field, _today() + timedelta(days=days))

    return mutator


def due_in_days(days: int) -> QueryMutator:
    return _due_in("due_on", "DueOn", days)


def due_in_at_least_days(days: int) -> QueryMutator:
    return _due_in("due_after", "DueAfter", days)


def due_in_at_most_days(days: int) -> QueryMutator:
    return _due_in("due_before", "DueBefore", days)


def _completed(value: bool) -> QueryMutator:
    def mutator(wc, q: SearchQuery) -> None:
        _claim(q, "completed", "Completed")
        q.completed = value

    return mutator


def only_incomplete() -> QueryMutator:
    return _completed(False)


def only_complete() -> QueryMutator:
    return _completed(True)


def without_due() -> QueryMutator:
    def mutator(wc, q: SearchQuery) -> None:
        _claim(q, "due", "Due")
        q.due = False

    return mutator


def _tags(field: str, names: Sequence[str]) -> QueryMutator:
    def mutator(wc, q: SearchQuery) -> None:
        tags_by_name = wc.get_tags_by_name()
        target = getattr(q, field)

        for name in names:
            tag = tags_by_name.get(name)
            if tag is None:
                raise AutomanaConfigError(f"Tag '{name}' not found", name=name, stage="query")
            target.append(tag)

    return mutator


def with_tags_any_of(names: Sequence[str]) -> QueryMutator:
    return _tags("tags_any", names)


def without_tags_any_of(names: Sequence[str]) -> QueryMutator:
    return _tags("tags_not", names)
