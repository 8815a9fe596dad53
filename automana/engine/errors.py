"""
Automana Error Hierarchy — Structured exceptions for rule execution.

Every error raised inside a rule iteration is caught at the iteration
boundary, logged on one line and swallowed. Only AutomanaValidationError,
raised while the scheduler starts, is fatal to the process.

Hierarchy:
    AutomanaError
    ├── AutomanaConfigError       — Duplicate constraint / unresolvable name
    ├── AutomanaGateError         — Bad time zone or time-of-day string
    ├── AutomanaIntegrationError  — Remote service call failed
    ├── AutomanaDataError         — Remote data violates an expectation
    └── AutomanaValidationError   — Startup validation failed (fatal)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class AutomanaError(Exception):
    """
    Base error for all Automana failures.
    All context is serializable to JSON for the structured log.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.rule_name: Optional[str] = context.get("rule_name")
        self.stage: Optional[str] = context.get("stage")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "rule_name": self.rule_name,
            "stage": self.stage,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k not in ("rule_name", "stage")
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.rule_name:
            parts.append(f"rule={self.rule_name}")
        if self.stage:
            parts.append(f"stage={self.stage}")
        return " | ".join(parts)


class AutomanaConfigError(AutomanaError):
    """
    Rule configuration is inconsistent with itself or with remote data:
    a singular query field set twice, or a section/tag name that cannot
    be resolved. Recurs every iteration until the rule or data changes.
    """

    def __init__(self, message: str, **context: Any):
        self.field: Optional[str] = context.get("field")
        self.name: Optional[str] = context.get("name")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["field"] = self.field
        d["name"] = self.name
        return d


class AutomanaGateError(AutomanaError):
    """A gate could not be evaluated (unknown zone, unparseable time)."""
    pass


class AutomanaIntegrationError(AutomanaError):
    """Remote service call failed (transport error or non-2xx response)."""

    def __init__(self, message: str, **context: Any):
        self.method: Optional[str] = context.get("method")
        self.path: Optional[str] = context.get("path")
        self.status_code: Optional[int] = context.get("status_code")
        self.response_body: Optional[str] = context.get("response_body")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["method"] = self.method
        d["path"] = self.path
        d["status_code"] = self.status_code
        return d


class AutomanaDataError(AutomanaError):
    """Remote data is missing something the rule relies on."""

    def __init__(self, message: str, **context: Any):
        self.task_gid: Optional[str] = context.get("task_gid")
        super().__init__(message, **context)


class AutomanaValidationError(AutomanaError):
    """Rule failed startup validation. Fatal — never retried."""
    pass
