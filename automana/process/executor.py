"""
Automana Rule Executor — one iteration of one rule.

Order (fixed):
    1. Resolve the workspace-scoped client
    2. Gates — the first False ends the iteration successfully, no work done
    3. Query mutators build a fresh SearchQuery
    4. Remote search
    5. Task filters narrow the results, keeping search order
    6. For each surviving task in order, every actor in order

Any exception propagates to the caller. In particular the first actor
failure aborts the whole iteration: later tasks are not touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from automana.client.models import Task
from automana.client.query import SearchQuery
from automana.rules.rule import Rule

logger = logging.getLogger("automana.process.executor")


@dataclass
class IterationResult:
    """Outcome of a successful iteration."""
    gated: bool = False
    searched: int = 0
    matched: int = 0
    acted: int = 0


class RuleExecutor:
    def __init__(self, client):
        self.client = client

    def execute(self, rule: Rule) -> IterationResult:
        wc = rule.get_workspace_client(self.client)

        for gate in rule.gates:
            if not gate(wc):
                logger.debug(f"[{rule.name}] gate closed")
                return IterationResult(gated=True)

        q = SearchQuery()
        for mutator in rule.query_mutators:
            mutator(wc, q)

        tasks = wc.search(q)
        filtered = self.filter_tasks(rule, wc, q, tasks)

        for task in filtered:
            for actor in rule.task_actors:
                actor(wc, task)

        return IterationResult(searched=len(tasks), matched=len(filtered), acted=len(filtered))

    @staticmethod
    def filter_tasks(rule: Rule, wc, q: SearchQuery, tasks: List[Task]) -> List[Task]:
        """Tasks passing every filter; each task's chain stops at its first False."""
        ret: List[Task] = []

        for task in tasks:
            if all(task_filter(wc, q, task) for task_filter in rule.task_filters):
                ret.append(task)

        return ret
