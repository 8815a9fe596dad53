"""Automana Engine — errors, configuration, logging."""

from automana.engine.config import PlatformConfig, get_platform_config, load_platform_config  # noqa: F401
from automana.engine.errors import (  # noqa: F401
    AutomanaConfigError,
    AutomanaDataError,
    AutomanaError,
    AutomanaGateError,
    AutomanaIntegrationError,
    AutomanaValidationError,
)

__all__ = [
    "PlatformConfig",
    "get_platform_config",
    "load_platform_config",
    "AutomanaError",
    "AutomanaConfigError",
    "AutomanaDataError",
    "AutomanaGateError",
    "AutomanaIntegrationError",
    "AutomanaValidationError",
]
