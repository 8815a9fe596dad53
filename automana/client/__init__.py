"""Automana Asana client — HTTP transport, resource models, search queries."""

from automana.client.client import Client, new_client_from_env  # noqa: F401
from automana.client.models import Project, Section, Tag, Task, User, Workspace  # noqa: F401
from automana.client.query import SearchQuery  # noqa: F401
from automana.client.workspace import WorkspaceClient  # noqa: F401

__all__ = [
    "Client",
    "new_client_from_env",
    "WorkspaceClient",
    "SearchQuery",
    "Project",
    "Section",
    "Tag",
    "Task",
    "User",
    "Workspace",
]
