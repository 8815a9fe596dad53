"""
Automana Configuration — Load and validate automana.yaml at startup.

Usage:
    from automana.engine.config import load_platform_config, get_platform_config
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator

from automana.engine.errors import AutomanaConfigError

CONFIG_FILENAME = "automana.yaml"
TOKEN_ENV_VAR = "ASANA_TOKEN"
RULES_ENV_VAR = "AUTOMANA_RULES"


# ---------------------------------------------------------------------------
# Pydantic models for automana.yaml
# ---------------------------------------------------------------------------

class AsanaConfig(BaseModel):
    base_url: str = "https://app.asana.com/api/1.0"
    token: str = ""
    timeout: int = 30
    page_size: int = 100

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        if not 1 <= v <= 100:
            raise ValueError(f"page_size must be between 1 and 100, got {v}")
        return v


class SchedulerConfig(BaseModel):
    # Sleep between iterations of one rule. 0 polls without pause.
    iteration_interval_seconds: float = 15.0

    @field_validator("iteration_interval_seconds")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"iteration_interval_seconds must be >= 0, got {v}")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: str = ".automana/logs"
    structured: bool = True
    flush_interval_ms: int = 100
    flush_batch_size: int = 50
    max_queue_size: int = 10000

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"level must be a logging level name, got '{v}'")
        return v


class PlatformConfig(BaseModel):
    """Root model for automana.yaml."""
    name: str = "Automana"
    asana: AsanaConfig = AsanaConfig()
    scheduler: SchedulerConfig = SchedulerConfig()
    logging: LoggingConfig = LoggingConfig()
    rules_module: Optional[str] = None


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_platform_config: Optional[PlatformConfig] = None


def _find_config_file() -> Optional[Path]:
    """Walk up from CWD looking for automana.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_platform_config(config_path: Optional[str] = None) -> PlatformConfig:
    """
    Load and validate automana.yaml.

    Args:
        config_path: Explicit path to automana.yaml. If None, auto-discovers.

    Returns:
        Validated PlatformConfig instance. Defaults apply when no file
        exists. ASANA_TOKEN and AUTOMANA_RULES override the file.
    """
    global _platform_config

    raw: dict = {}
    path = Path(config_path) if config_path else _find_config_file()

    if path is not None:
        if not path.exists():
            raise AutomanaConfigError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise AutomanaConfigError(f"Config file must contain a mapping: {path}")

    token = os.environ.get(TOKEN_ENV_VAR)
    if token:
        raw.setdefault("asana", {})
        raw["asana"]["token"] = token

    rules_module = os.environ.get(RULES_ENV_VAR)
    if rules_module:
        raw["rules_module"] = rules_module

    _platform_config = PlatformConfig(**raw)
    return _platform_config


def get_platform_config() -> PlatformConfig:
    """Get the currently loaded platform config, loading if necessary."""
    global _platform_config
    if _platform_config is None:
        _platform_config = load_platform_config()
    return _platform_config
