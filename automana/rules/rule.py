"""
Rule — an ordered pipeline of gates, query mutators, task filters and task
actors bound to one workspace.

Built with an append-only fluent interface; every builder method returns
the rule itself. Stages of each kind run in the order they were added.

    registry.in_workspace("Acme") \\
        .when_between("America/New_York", "08:00", "18:00") \\
        .in_my_tasks_sections("Inbox") \\
        .only_incomplete() \\
        .with_unlinked_url() \\
        .fix_unlinked_url()

Once the scheduler has started a rule it is frozen; further builder calls
raise AutomanaValidationError.
"""

from __future__ import annotations

from typing import Iterable, List

from automana.engine.errors import AutomanaValidationError
from automana.rules import actors, filters, gates, mutators


class Rule:
    def __init__(self, name: str, workspace: str):
        self.name = name
        self.workspace = workspace
        self.gates: List[gates.Gate] = []
        self.query_mutators: List[mutators.QueryMutator] = []
        self.task_filters: List[filters.TaskFilter] = []
        self.task_actors: List[actors.TaskActor] = []
        self._frozen = False

    def __repr__(self) -> str:
        return (
            f"Rule({self.name!r}, workspace={self.workspace!r}, gates={len(self.gates)}, "
            f"mutators={len(self.query_mutators)}, filters={len(self.task_filters)}, "
            f"actors={len(self.task_actors)})"
        )

    def get_workspace_client(self, client):
        return client.in_workspace(self.workspace)

    def _append(self, stages: list, stage) -> "Rule":
        if self._frozen:
            raise AutomanaValidationError(
                "Rule cannot be changed after the scheduler started",
                rule_name=self.name,
            )
        stages.append(stage)
        return self

    # Custom stages, same signatures as the built-in ones.
    def add_gate(self, gate: gates.Gate) -> "Rule":
        return self._append(self.gates, gate)

    def add_query_mutator(self, mutator: mutators.QueryMutator) -> "Rule":
        return self._append(self.query_mutators, mutator)

    def add_task_filter(self, task_filter: filters.TaskFilter) -> "Rule":
        return self._append(self.task_filters, task_filter)

    def add_task_actor(self, actor: actors.TaskActor) -> "Rule":
        return self._append(self.task_actors, actor)

    # -----------------------------------------------------------------------
    # Gates
    # -----------------------------------------------------------------------

    def when_between(self, tz: str, start: str, end: str) -> "Rule":
        return self._append(self.gates, gates.when_between(tz, start, end))

    def when_day_of_week(self, tz: str, days: Iterable[int]) -> "Rule":
        return self._append(self.gates, gates.when_day_of_week(tz, days))

    # -----------------------------------------------------------------------
    # Query mutators
    # -----------------------------------------------------------------------

    def in_my_tasks_sections(self, *names: str) -> "Rule":
        self._append(self.query_mutators, mutators.in_my_tasks_sections(names))
        return self._append(self.task_filters, filters.in_query_sections())

    def due_in_days(self, days: int) -> "Rule":
        return self._append(self.query_mutators, mutators.due_in_days(days))

    def due_in_at_least_days(self, days: int) -> "Rule":
        return self._append(self.query_mutators, mutators.due_in_at_least_days(days))

    def due_in_at_most_days(self, days: int) -> "Rule":
        return self._append(self.query_mutators, mutators.due_in_at_most_days(days))

    def only_incomplete(self) -> "Rule":
        return self._append(self.query_mutators, mutators.only_incomplete())

    def only_complete(self) -> "Rule":
        return self._append(self.query_mutators, mutators.only_complete())

    def with_tags_any_of(self, *names: str) -> "Rule":
        return self._append(self.query_mutators, mutators.with_tags_any_of(names))

    def without_tags_any_of(self, *names: str) -> "Rule":
        return self._append(self.query_mutators, mutators.without_tags_any_of(names))

    def without_due(self) -> "Rule":
        return self._append(self.query_mutators, mutators.without_due())

    # -----------------------------------------------------------------------
    # Task filters
    # -----------------------------------------------------------------------

    def with_unlinked_url(self) -> "Rule":
        return self._append(self.task_filters, filters.with_unlinked_url())

    # -----------------------------------------------------------------------
    # Task actors
    # -----------------------------------------------------------------------

    def fix_unlinked_url(self) -> "Rule":
        return self._append(self.task_actors, actors.fix_unlinked_url())

    def move_to_my_tasks_section(self, name: str) -> "Rule":
        return self._append(self.task_actors, actors.move_to_my_tasks_section(name))

    def print_tasks(self) -> "Rule":
        return self._append(self.task_actors, actors.print_tasks())

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def validate(self) -> None:
        """Startup checks. Failure here is fatal to the whole process."""
        if not self.workspace:
            raise AutomanaValidationError("Rule has no workspace", rule_name=self.name)
        if not self.task_actors:
            raise AutomanaValidationError("Rule has no task actors", rule_name=self.name)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen
