"""Automana Process Engine — rule registry, executor and scheduler."""

from automana.process.executor import IterationResult, RuleExecutor  # noqa: F401
from automana.process.registry import RuleRegistry, load_rules  # noqa: F401
from automana.process.scheduler import RuleScheduler, loop  # noqa: F401

__all__ = [
    "IterationResult",
    "RuleExecutor",
    "RuleRegistry",
    "RuleScheduler",
    "load_rules",
    "loop",
]
