"""
Workspace-scoped Asana operations consumed by the rule engine.

Each method is one independent remote call (or a paginated series of
them); nothing here holds cross-call state besides the cached identity.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from automana.client.client import Client
from automana.client.models import Project, Section, Tag, Task, User, Workspace
from automana.client.query import SearchQuery
from automana.engine.errors import AutomanaConfigError

logger = logging.getLogger("automana.client.workspace")

TASK_FIELDS = ",".join([
    "name",
    "html_notes",
    "completed",
    "due_on",
    "created_at",
    "assignee_section",
    "assignee_section.name",
])


class WorkspaceClient:
    def __init__(self, client: Client, workspace: Workspace):
        self.client = client
        self.workspace = workspace

    def __str__(self) -> str:
        return f"workspace {self.workspace}"

    # -----------------------------------------------------------------------
    # Identity
    # -----------------------------------------------------------------------

    def get_me(self) -> User:
        return User(**self.client.get("users/me"))

    def get_my_user_task_list(self) -> Project:
        data = self.client.get(
            "users/me/user_task_list",
            params={"workspace": self.workspace.gid},
        )
        return Project(**data)

    # -----------------------------------------------------------------------
    # Sections
    # -----------------------------------------------------------------------

    def get_sections(self, project: Project) -> List[Section]:
        return [Section(**s) for s in self.client.get_paginated(f"projects/{project.gid}/sections")]

    def get_sections_by_name(self, project: Project) -> Dict[str, Section]:
        return {sec.name: sec for sec in self.get_sections(project)}

    def get_section_by_name(self, project: Project, name: str) -> Section:
        sec = self.get_sections_by_name(project).get(name)
        if sec is None:
            raise AutomanaConfigError(f"Section '{name}' not found", name=name)
        return sec

    def add_task_to_section(self, task: Task, section: Section) -> None:
        self.client.post(f"sections/{section.gid}/addTask", {"task": task.gid})

    def get_tasks_from_section(self, section: Section) -> List[Task]:
        tasks = self.client.get_paginated(
            f"sections/{section.gid}/tasks",
            params={"opt_fields": TASK_FIELDS},
        )
        return [Task(**t) for t in tasks]

    # -----------------------------------------------------------------------
    # Tags
    # -----------------------------------------------------------------------

    def get_tags(self) -> List[Tag]:
        return [Tag(**t) for t in self.client.get_paginated(f"workspaces/{self.workspace.gid}/tags")]

    def get_tags_by_name(self) -> Dict[str, Tag]:
        return {tag.name: tag for tag in self.get_tags()}

    # -----------------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------------

    def search(self, query: SearchQuery) -> List[Task]:
        """
        Run a workspace task search.

        The search endpoint has no offset paging, so results are walked
        newest-first by created_at until a short page comes back. Order of
        the returned list is the service's order.
        """
        params = query.to_params()
        params["opt_fields"] = TASK_FIELDS
        params["sort_by"] = "created_at"
        params["sort_ascending"] = "false"
        params["limit"] = str(self.client.page_size)

        path = f"workspaces/{self.workspace.gid}/tasks/search"
        ret: List[Task] = []

        while True:
            page = [Task(**t) for t in self.client.get(path, params=params) or []]
            ret.extend(page)

            if len(page) < self.client.page_size or page[-1].created_at is None:
                break

            params["created_at.before"] = page[-1].created_at.isoformat()

        logger.debug(f"Search in {self.workspace} returned {len(ret)} task(s)")
        return ret

    def update_task(self, task: Task) -> None:
        """PUT only the fields explicitly set on ``task``, keyed by its gid."""
        data = task.model_dump(mode="json", exclude_unset=True, exclude={"gid"})
        self.client.put(f"tasks/{task.gid}", data)
