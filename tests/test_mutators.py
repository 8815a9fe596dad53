"""Unit tests for automana.rules.mutators — building SearchQuery constraints."""

from datetime import date

import pytest

import automana.rules.mutators as mut_mod
from automana.client.query import SearchQuery
from automana.engine.errors import AutomanaConfigError, AutomanaIntegrationError
from automana.rules.mutators import (
    due_in_at_least_days,
    due_in_at_most_days,
    due_in_days,
    in_my_tasks_sections,
    only_complete,
    only_incomplete,
    with_tags_any_of,
    without_due,
    without_tags_any_of,
)


@pytest.fixture
def today(monkeypatch):
    monkeypatch.setattr(mut_mod, "_today", lambda: date(2024, 6, 5))


class TestInMyTasksSections:
    def test_adds_assignee_and_sections(self, wc):
        q = SearchQuery()
        in_my_tasks_sections(["Inbox", "Today"])(wc, q)

        assert [u.gid for u in q.assignee_any] == ["u1"]
        assert [s.gid for s in q.sections_any] == ["s1", "s2"]
        wc.get_sections_by_name.assert_called_once_with(wc.get_my_user_task_list.return_value)

    def test_unknown_section_fails(self, wc):
        with pytest.raises(AutomanaConfigError, match="Section 'Nope' not found"):
            in_my_tasks_sections(["Inbox", "Nope"])(wc, SearchQuery())

    def test_accumulates_across_mutators(self, wc):
        q = SearchQuery()
        in_my_tasks_sections(["Inbox"])(wc, q)
        in_my_tasks_sections(["Later"])(wc, q)
        assert [s.gid for s in q.sections_any] == ["s1", "s3"]
        assert len(q.assignee_any) == 2

    def test_collaborator_error_propagates(self, wc):
        wc.get_me.side_effect = AutomanaIntegrationError("boom", status_code=500)
        with pytest.raises(AutomanaIntegrationError):
            in_my_tasks_sections(["Inbox"])(wc, SearchQuery())


class TestDueDates:
    def test_due_in_days(self, wc, today):
        q = SearchQuery()
        due_in_days(3)(wc, q)
        assert q.due_on == date(2024, 6, 8)

    def test_due_in_at_least_days(self, wc, today):
        q = SearchQuery()
        due_in_at_least_days(0)(wc, q)
        assert q.due_after == date(2024, 6, 5)

    def test_due_in_at_most_days_negative(self, wc, today):
        q = SearchQuery()
        due_in_at_most_days(-1)(wc, q)
        assert q.due_before == date(2024, 6, 4)

    def test_different_fields_coexist(self, wc, today):
        q = SearchQuery()
        due_in_at_least_days(1)(wc, q)
        due_in_at_most_days(7)(wc, q)
        assert q.due_after < q.due_before

    @pytest.mark.parametrize("factory,label", [
        (due_in_days, "DueOn"),
        (due_in_at_least_days, "DueAfter"),
        (due_in_at_most_days, "DueBefore"),
    ])
    def test_double_set_fails(self, wc, today, factory, label):
        q = SearchQuery()
        factory(1)(wc, q)
        with pytest.raises(AutomanaConfigError, match=f"Multiple clauses set {label}"):
            factory(2)(wc, q)


class TestCompleted:
    def test_only_incomplete(self, wc):
        q = SearchQuery()
        only_incomplete()(wc, q)
        assert q.completed is False

    def test_only_complete(self, wc):
        q = SearchQuery()
        only_complete()(wc, q)
        assert q.completed is True

    def test_only_incomplete_twice_fails(self, wc):
        q = SearchQuery()
        mutator = only_incomplete()
        mutator(wc, q)
        with pytest.raises(AutomanaConfigError, match="Completed") as exc_info:
            mutator(wc, q)
        assert exc_info.value.field == "completed"

    def test_conflicting_completion_fails(self, wc):
        q = SearchQuery()
        only_complete()(wc, q)
        with pytest.raises(AutomanaConfigError):
            only_incomplete()(wc, q)
        assert q.completed is True


class TestWithoutDue:
    def test_sets_flag(self, wc):
        q = SearchQuery()
        without_due()(wc, q)
        assert q.due is False

    def test_twice_fails(self, wc):
        q = SearchQuery()
        without_due()(wc, q)
        with pytest.raises(AutomanaConfigError, match="Due"):
            without_due()(wc, q)


class TestTags:
    def test_with_tags_any_of(self, wc):
        q = SearchQuery()
        with_tags_any_of(["urgent", "waiting"])(wc, q)
        assert [t.gid for t in q.tags_any] == ["t1", "t2"]

    def test_without_tags_any_of(self, wc):
        q = SearchQuery()
        without_tags_any_of(["waiting"])(wc, q)
        assert [t.gid for t in q.tags_not] == ["t2"]
        assert q.tags_any == []

    def test_unknown_tag_fails(self, wc):
        with pytest.raises(AutomanaConfigError, match="Tag 'missing' not found"):
            with_tags_any_of(["missing"])(wc, SearchQuery())

    def test_accumulates(self, wc):
        q = SearchQuery()
        with_tags_any_of(["urgent"])(wc, q)
        with_tags_any_of(["waiting"])(wc, q)
        assert [t.gid for t in q.tags_any] == ["t1", "t2"]
