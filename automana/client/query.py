"""Search request accumulated by a rule's query mutators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from automana.client.models import Section, Tag, User
from automana.engine.errors import AutomanaConfigError


@dataclass
class SearchQuery:
    """
    Optional constraints for a workspace task search.

    List fields accumulate across mutators. Scalar fields may be set once
    per iteration; the mutators enforce that.
    """

    assignee_any: List[User] = field(default_factory=list)
    sections_any: List[Section] = field(default_factory=list)
    tags_any: List[Tag] = field(default_factory=list)
    tags_not: List[Tag] = field(default_factory=list)
    due_on: Optional[date] = None
    due_after: Optional[date] = None
    due_before: Optional[date] = None
    completed: Optional[bool] = None
    due: Optional[bool] = None

    def to_params(self) -> Dict[str, str]:
        """Render as tasks/search query parameters."""
        params: Dict[str, str] = {}

        for key, resources in (
            ("assignee.any", self.assignee_any),
            ("sections.any", self.sections_any),
            ("tags.any", self.tags_any),
            ("tags.not", self.tags_not),
        ):
            if resources:
                params[key] = ",".join(r.gid for r in resources)

        if self.due is False:
            if self.due_on or self.due_after or self.due_before:
                raise AutomanaConfigError(
                    "Query asks for tasks without a due date and with a due date constraint",
                    field="due",
                )
            params["due_on"] = "null"

        if self.due_on:
            params["due_on"] = self.due_on.isoformat()
        if self.due_after:
            params["due_on.after"] = self.due_after.isoformat()
        if self.due_before:
            params["due_on.before"] = self.due_before.isoformat()

        if self.completed is not None:
            params["completed"] = "true" if self.completed else "false"

        return params
