"""Unit tests for automana.process.executor — one rule iteration."""

import pytest

from automana.engine.errors import AutomanaConfigError, AutomanaDataError, AutomanaGateError
from automana.process.executor import IterationResult, RuleExecutor
from automana.rules.rule import Rule


def recording_actor(calls, label):
    def actor(wc, t):
        calls.append((label, t.gid))
    return actor


@pytest.fixture
def executor(client):
    return RuleExecutor(client)


class TestGates:
    def test_closed_gate_skips_everything(self, executor, wc):
        mutator_calls = []
        rule = (
            Rule("r", "Acme")
            .add_gate(lambda wc: False)
            .add_query_mutator(lambda wc, q: mutator_calls.append(q))
            .print_tasks()
        )
        result = executor.execute(rule)
        assert result == IterationResult(gated=True)
        assert mutator_calls == []
        wc.search.assert_not_called()

    def test_gates_short_circuit(self, executor, wc):
        seen = []
        rule = (
            Rule("r", "Acme")
            .add_gate(lambda wc: seen.append(1) or False)
            .add_gate(lambda wc: seen.append(2) or True)
            .print_tasks()
        )
        executor.execute(rule)
        assert seen == [1]

    def test_gate_error_propagates(self, executor, wc):
        def bad_gate(wc):
            raise AutomanaGateError("bad zone")

        rule = Rule("r", "Acme").add_gate(bad_gate).print_tasks()
        with pytest.raises(AutomanaGateError):
            executor.execute(rule)
        wc.search.assert_not_called()


class TestQuery:
    def test_fresh_query_each_iteration(self, executor, wc):
        rule = Rule("r", "Acme").only_incomplete().print_tasks()
        executor.execute(rule)
        executor.execute(rule)
        assert wc.search.call_count == 2
        assert wc.search.call_args.args[0].completed is False

    def test_mutator_conflict_aborts(self, executor, wc):
        rule = Rule("r", "Acme").only_incomplete().only_incomplete().print_tasks()
        with pytest.raises(AutomanaConfigError):
            executor.execute(rule)
        wc.search.assert_not_called()

    def test_workspace_failure(self, executor, client, wc):
        client.in_workspace.side_effect = AutomanaConfigError("Workspace 'Acme' not found")
        with pytest.raises(AutomanaConfigError):
            executor.execute(Rule("r", "Acme").print_tasks())


class TestFiltersAndActors:
    def test_all_actors_per_task_in_order(self, executor, wc, make_task):
        wc.search.return_value = [make_task(gid="T1"), make_task(gid="T2")]
        calls = []
        rule = (
            Rule("r", "Acme")
            .add_task_actor(recording_actor(calls, "a"))
            .add_task_actor(recording_actor(calls, "b"))
        )
        result = executor.execute(rule)
        assert calls == [("a", "T1"), ("b", "T1"), ("a", "T2"), ("b", "T2")]
        assert result == IterationResult(searched=2, matched=2, acted=2)

    def test_filters_keep_search_order(self, executor, wc, make_task):
        wc.search.return_value = [make_task(gid=g) for g in ("3", "1", "4", "2")]
        calls = []
        rule = (
            Rule("r", "Acme")
            .add_task_filter(lambda wc, q, t: t.gid != "4")
            .add_task_actor(recording_actor(calls, "a"))
        )
        result = executor.execute(rule)
        assert [gid for _, gid in calls] == ["3", "1", "2"]
        assert result.matched == 3

    def test_filter_chain_short_circuits(self, executor, wc, make_task):
        wc.search.return_value = [make_task(gid="T1")]
        second = []
        rule = (
            Rule("r", "Acme")
            .add_task_filter(lambda wc, q, t: False)
            .add_task_filter(lambda wc, q, t: second.append(t) or True)
            .print_tasks()
        )
        executor.execute(rule)
        assert second == []

    def test_filter_error_aborts(self, executor, wc, sections, make_task):
        wc.search.return_value = [make_task(gid="T1", section=None)]
        rule = Rule("r", "Acme").in_my_tasks_sections("Inbox").print_tasks()
        with pytest.raises(AutomanaDataError):
            executor.execute(rule)

    def test_first_actor_error_aborts_iteration(self, executor, wc, make_task):
        wc.search.return_value = [make_task(gid="T1"), make_task(gid="T2")]
        calls = []

        def failing(wc, t):
            raise RuntimeError(f"cannot act on {t.gid}")

        rule = (
            Rule("r", "Acme")
            .add_task_actor(failing)
            .add_task_actor(recording_actor(calls, "after"))
        )
        with pytest.raises(RuntimeError, match="T1"):
            executor.execute(rule)
        assert calls == []

    def test_linkify_rule_end_to_end(self, executor, wc, sections, make_task):
        wc.search.return_value = [
            make_task(gid="T1", section=sections["Inbox"], html_notes="<body>https://a.example</body>"),
            make_task(gid="T2", section=sections["Inbox"], html_notes="<body>no links</body>"),
            make_task(gid="T3", section=sections["Later"], html_notes="<body>https://c.example</body>"),
        ]
        rule = (
            Rule("r", "Acme")
            .in_my_tasks_sections("Inbox")
            .only_incomplete()
            .with_unlinked_url()
            .fix_unlinked_url()
        )
        result = executor.execute(rule)

        assert result.matched == 1
        wc.update_task.assert_called_once()
        update = wc.update_task.call_args.args[0]
        assert update.gid == "T1"
        assert update.html_notes == '<body><a href="https://a.example">https://a.example</a></body>'
