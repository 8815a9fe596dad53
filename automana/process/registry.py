"""
Rule registry — the explicit list of rules a process runs.

Rules are registered at start-up (typically by a user module exposing
``register(registry)``) and handed to the scheduler as a whole.
"""

from __future__ import annotations

import importlib
import logging
from typing import List, Optional

from automana.engine.errors import AutomanaValidationError
from automana.rules.rule import Rule

logger = logging.getLogger("automana.process.registry")


class RuleRegistry:
    """
    Usage:
        registry = RuleRegistry()
        registry.in_workspace("Acme").only_incomplete().print_tasks()
        RuleScheduler(registry, client).run()
    """

    def __init__(self) -> None:
        self._rules: List[Rule] = []

    def in_workspace(self, workspace: str, name: Optional[str] = None) -> Rule:
        """Create, register and return a new rule bound to ``workspace``."""
        rule = Rule(name or f"{workspace}#{len(self._rules) + 1}", workspace)
        self.register(rule)
        return rule

    def register(self, rule: Rule) -> None:
        if any(r.name == rule.name for r in self._rules):
            raise AutomanaValidationError(f"Duplicate rule name: {rule.name}", rule_name=rule.name)
        self._rules.append(rule)
        logger.debug(f"Registered rule: {rule.name}")

    def validate_all(self) -> None:
        """Validate every rule; the first failure raises."""
        for rule in self._rules:
            rule.validate()

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    @property
    def count(self) -> int:
        return len(self._rules)

    def clear(self) -> None:
        self._rules.clear()


def load_rules(module_path: str, registry: Optional[RuleRegistry] = None) -> RuleRegistry:
    """
    Import ``module_path`` and call its ``register(registry)``.

    Raises:
        AutomanaValidationError if the module cannot be imported or has no
        register() function.
    """
    if registry is None:
        registry = RuleRegistry()

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise AutomanaValidationError(f"Cannot import rules module '{module_path}': {e}") from e

    register = getattr(module, "register", None)
    if not callable(register):
        raise AutomanaValidationError(f"Rules module '{module_path}' has no register(registry) function")

    register(registry)
    logger.info(f"Loaded {registry.count} rule(s) from {module_path}")
    return registry
