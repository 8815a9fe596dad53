"""Task filters — per-task predicates applied to search results."""

from __future__ import annotations

from typing import Callable

from automana.client.models import Task
from automana.client.query import SearchQuery
from automana.engine.errors import AutomanaDataError
from automana.rules.linkify import has_unlinked_url

TaskFilter = Callable[..., bool]


def in_query_sections() -> TaskFilter:
    """
    Re-check section membership claimed by the search. The search endpoint
    has been seen returning tasks from other sections.
    """

    def task_filter(wc, q: SearchQuery, t: Task) -> bool:
        if t.assignee_section is None:
            raise AutomanaDataError(f"missing assignee section: {t}", task_gid=t.gid, stage="filter")

        return any(sec.gid == t.assignee_section.gid for sec in q.sections_any)

    return task_filter


def with_unlinked_url() -> TaskFilter:
    def task_filter(wc, q: SearchQuery, t: Task) -> bool:
        return has_unlinked_url(t.parsed_html_notes)

    return task_filter
