"""
Automana Rule Scheduler — one never-ending worker thread per rule.

Responsibilities:
1. Validate every registered rule before any worker starts (fatal on error)
2. Freeze rules and start one daemon thread per rule
3. Loop each rule forever: run an iteration, log and swallow any error,
   sleep the configured interval, repeat
4. Block the caller until every worker finishes (never, in normal operation)

Workers share nothing but the client; each iteration builds its own query
and task list.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Dict, List, Optional

from automana.engine.errors import AutomanaError
from automana.engine.logging import log, log_rule_iteration, log_system_event
from automana.process.executor import IterationResult, RuleExecutor
from automana.process.registry import RuleRegistry
from automana.rules.rule import Rule

logger = logging.getLogger("automana.process.scheduler")


class RuleScheduler:
    """
    Args:
        registry: Rules to run.
        client: Asana Client shared by all workers.
        iteration_interval: Seconds to sleep between iterations of a rule.
        max_iterations: Stop each worker after this many iterations.
            None (the default) loops forever.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        client,
        iteration_interval: float = 0.0,
        max_iterations: Optional[int] = None,
    ) -> None:
        self.registry = registry
        self.executor = RuleExecutor(client)
        self.iteration_interval = iteration_interval
        self.max_iterations = max_iterations
        self._threads: Dict[str, threading.Thread] = {}

    def start(self) -> None:
        """
        Validate all rules, then start their workers.
        AutomanaValidationError propagates before any worker runs.
        """
        rules = self.registry.rules
        self.registry.validate_all()

        for rule in rules:
            rule.freeze()

        for rule in rules:
            thread = threading.Thread(
                target=self._loop,
                args=(rule,),
                name=f"automana-rule-{rule.name}",
                daemon=True,
            )
            self._threads[rule.name] = thread
            thread.start()

        log(log_system_event("scheduler_started", f"Started {len(rules)} rule worker(s)", rules=[r.name for r in rules]))
        logger.info(f"Started {len(rules)} rule worker(s)")

    def wait(self) -> None:
        for thread in self._threads.values():
            thread.join()

    def run(self) -> None:
        self.start()
        self.wait()

    @property
    def workers(self) -> List[str]:
        return list(self._threads.keys())

    def _loop(self, rule: Rule) -> None:
        iteration = 0
        while self.max_iterations is None or iteration < self.max_iterations:
            iteration += 1
            self.run_iteration(rule, iteration)

            if self.iteration_interval > 0 and (
                self.max_iterations is None or iteration < self.max_iterations
            ):
                time.sleep(self.iteration_interval)

        logger.debug(f"[{rule.name}] worker finished after {iteration} iteration(s)")

    def run_iteration(self, rule: Rule, iteration: int = 1) -> Optional[IterationResult]:
        """
        Run one iteration. Any error is logged on one line and swallowed;
        returns None in that case.
        """
        start_time = time.monotonic()

        try:
            result = self.executor.execute(rule)
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            if isinstance(e, AutomanaError):
                error = e.to_dict()
            else:
                error = {"error_type": type(e).__name__, "message": str(e)}
            logger.error(f"ERROR: [{rule.name}] {e}")
            log(log_rule_iteration(rule.name, iteration, duration_ms, success=False, error=error))
            return None

        duration_ms = (time.monotonic() - start_time) * 1000
        log(log_rule_iteration(
            rule.name,
            iteration,
            duration_ms,
            success=True,
            gated=result.gated,
            searched=result.searched,
            matched=result.matched,
            acted=result.acted,
        ))
        if result.acted:
            logger.info(f"[{rule.name}] acted on {result.acted} task(s)")
        return result


def loop(registry: RuleRegistry, client=None, config=None) -> None:
    """
    Process entry point: connect with the default configuration, start every
    registered rule, and block (forever, in practice).
    """
    from automana.client.client import Client
    from automana.engine.config import get_platform_config

    if config is None:
        config = get_platform_config()
    if client is None:
        client = Client.from_config(config.asana)

    scheduler = RuleScheduler(
        registry,
        client,
        iteration_interval=config.scheduler.iteration_interval_seconds,
    )
    scheduler.run()
