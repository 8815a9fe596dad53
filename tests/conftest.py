"""
Automana Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from automana.client.models import Project, Section, Tag, Task, User, Workspace


# ---------------------------------------------------------------------------
# Environment setup — never read a developer's token or config in unit tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Reset global singletons and env overrides between tests."""
    import automana.engine.config as cfg_mod
    import automana.engine.logging as log_mod

    monkeypatch.delenv("ASANA_TOKEN", raising=False)
    monkeypatch.delenv("AUTOMANA_RULES", raising=False)
    monkeypatch.chdir(tmp_path)
    cfg_mod._platform_config = None
    log_mod._global_queue = None


@pytest.fixture
def sections():
    return {
        "Inbox": Section(gid="s1", name="Inbox"),
        "Today": Section(gid="s2", name="Today"),
        "Later": Section(gid="s3", name="Later"),
    }


@pytest.fixture
def tags():
    return {
        "urgent": Tag(gid="t1", name="urgent"),
        "waiting": Tag(gid="t2", name="waiting"),
    }


@pytest.fixture
def make_task():
    """Build a Task; notes default to a plain body."""

    def _make(gid="100", name="Task", html_notes="<body>nothing here</body>", section=None, **kw):
        return Task(gid=gid, name=name, html_notes=html_notes, assignee_section=section, **kw)

    return _make


@pytest.fixture
def wc(sections, tags):
    """A mock WorkspaceClient with a user, a My Tasks list, sections and tags."""
    client = MagicMock()
    client.workspace = Workspace(gid="w1", name="Acme")
    client.get_me.return_value = User(gid="u1", name="Me")
    client.get_my_user_task_list.return_value = Project(gid="utl1", name="My Tasks")
    client.get_sections_by_name.return_value = dict(sections)
    client.get_tags_by_name.return_value = dict(tags)
    client.search.return_value = []

    def section_by_name(project, name):
        from automana.engine.errors import AutomanaConfigError

        if name not in sections:
            raise AutomanaConfigError(f"Section '{name}' not found", name=name)
        return sections[name]

    client.get_section_by_name.side_effect = section_by_name
    return client


@pytest.fixture
def client(wc):
    """A mock Client whose in_workspace() returns the mock WorkspaceClient."""
    c = MagicMock()
    c.in_workspace.return_value = wc
    return c
