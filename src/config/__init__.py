"""
Configuration Module.
"""

from src.config.environment import (
    Environment,
    DelimiterConfig,
    InterchangeConfig,
    LoggingConfig,
    AppConfig,
    get_config,
    get_environment_config,
    load_config_from_file,
    validate_production_config,
)

__all__ = [
    "Environment",
    "DelimiterConfig",
    "InterchangeConfig",
    "LoggingConfig",
    "AppConfig",
    "get_config",
    "get_environment_config",
    "load_config_from_file",
    "validate_production_config",
]
