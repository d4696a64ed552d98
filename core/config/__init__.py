"""
Runtime Configuration Module

Provides configuration loading and management.
"""

from .runtime import (
    ApiConfig,
    LimitsConfig,
    RuntimeConfig,
    load_runtime_config,
    get_default_config,
    set_default_config,
    get_default_config_template,
)

__all__ = [
    "ApiConfig",
    "LimitsConfig",
    "RuntimeConfig",
    "load_runtime_config",
    "get_default_config",
    "set_default_config",
    "get_default_config_template",
]
