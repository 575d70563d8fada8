"""Startup modules for component initialization.

- ConfigValidator: fail fast on missing/invalid settings
- StartupManager: build and connect the gateway, size the performance log,
  create the repository analyzer
"""

from .config_validator import ConfigValidator, ConfigValidationError
from .manager import StartupManager

__all__ = [
    'ConfigValidator',
    'ConfigValidationError',
    'StartupManager',
]
