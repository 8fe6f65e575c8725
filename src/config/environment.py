"""
Environment Configuration Service.

Provides environment-aware configuration for the EDI codec: delimiters,
interchange defaults, output format and logging.
"""

import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.enums import ControlNumberStrategy, OutputFormat, UsageIndicator


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class DelimiterConfig(BaseModel):
    """Delimiters written into generated interchanges."""

    element_separator: str = "*"
    sub_element_separator: str = ":"
    segment_terminator: str = "~"
    repetition_separator: str = "^"

    @field_validator(
        "element_separator",
        "sub_element_separator",
        "segment_terminator",
        "repetition_separator",
    )
    @classmethod
    def validate_single_character(cls, v: str) -> str:
        """Each delimiter occupies exactly one ISA position."""
        if len(v) != 1:
            raise ValueError("Delimiter must be a single character")
        if v.isalnum():
            raise ValueError("Delimiter must not be a letter or digit")
        return v

    @model_validator(mode="after")
    def validate_distinct(self) -> "DelimiterConfig":
        values = [
            self.element_separator,
            self.sub_element_separator,
            self.segment_terminator,
            self.repetition_separator,
        ]
        if len(set(values)) != len(values):
            raise ValueError("Delimiters must be distinct")
        return self

    def to_delimiters(self):
        """Convert to the codec's X12Delimiters."""
        from src.services.edi.x12_base import X12Delimiters

        return X12Delimiters(
            element_separator=self.element_separator,
            sub_element_separator=self.sub_element_separator,
            segment_terminator=self.segment_terminator,
            repetition_separator=self.repetition_separator,
        )


class InterchangeConfig(BaseModel):
    """Envelope defaults for generated 837D interchanges."""

    receiver_id: str = Field(default="RECEIVER", max_length=15)
    usage_indicator: UsageIndicator = UsageIndicator.PRODUCTION
    output_format: OutputFormat = OutputFormat.DISPLAY
    control_number_strategy: ControlNumberStrategy = ControlNumberStrategy.CLOCK
    control_number_start: int = Field(default=1, ge=1, le=999_999_999)
    validate_before_generate: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    json_logs: bool = False
    log_file: str | None = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class AppConfig(BaseSettings):
    """Main application configuration."""

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    app_name: str = "dental-edi-codec"
    app_version: str = "1.0.0"

    # Component configs
    delimiters: DelimiterConfig = Field(default_factory=DelimiterConfig)
    interchange: InterchangeConfig = Field(default_factory=InterchangeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="EDI_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment."""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_testing(self) -> bool:
        """Check if running in testing."""
        return self.environment == Environment.TESTING

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == Environment.PRODUCTION


def get_environment_config(env: Environment) -> dict[str, Any]:
    """Get environment-specific configuration overrides.

    Args:
        env: Target environment

    Returns:
        Configuration overrides for the environment
    """
    configs = {
        Environment.DEVELOPMENT: {
            "logging": {"level": "DEBUG"},
        },
        Environment.TESTING: {
            "logging": {"level": "WARNING"},
        },
        Environment.STAGING: {
            "logging": {"level": "INFO"},
            "interchange": {"output_format": OutputFormat.WIRE},
        },
        Environment.PRODUCTION: {
            "logging": {"level": "INFO", "json_logs": True},
            "interchange": {"output_format": OutputFormat.WIRE},
        },
    }

    return configs.get(env, {})


@lru_cache()
def get_config() -> AppConfig:
    """Get cached application configuration.

    Returns:
        Application configuration
    """
    env = os.getenv("EDI_ENVIRONMENT", os.getenv("ENVIRONMENT", "development")).lower()
    environment = Environment(env)

    # Load base config
    config = AppConfig(environment=environment)

    # Apply environment-specific overrides; explicitly set values win
    overrides = get_environment_config(environment)
    for key, value in overrides.items():
        if hasattr(config, key):
            nested_config = getattr(config, key)
            if isinstance(nested_config, BaseModel) and isinstance(value, dict):
                for nested_key, nested_value in value.items():
                    if nested_key in nested_config.model_fields_set:
                        continue
                    if hasattr(nested_config, nested_key):
                        setattr(nested_config, nested_key, nested_value)
            elif key not in config.model_fields_set:
                setattr(config, key, value)

    return config


def load_config_from_file(path: str | Path) -> AppConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to configuration file

    Returns:
        Application configuration
    """
    import yaml

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return AppConfig(**data)


def validate_production_config(config: AppConfig) -> list[str]:
    """Validate configuration for production deployment.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors
    """
    errors = []

    if not config.is_production:
        return errors

    if config.interchange.output_format != OutputFormat.WIRE:
        errors.append("OUTPUT_FORMAT must be 'wire' in production; line breaks are not part of X12")

    if config.interchange.usage_indicator != UsageIndicator.PRODUCTION:
        errors.append("USAGE_INDICATOR must be 'P' in production")

    if config.interchange.receiver_id == "RECEIVER":
        errors.append("RECEIVER_ID is still the placeholder value")

    if not config.interchange.validate_before_generate:
        errors.append("Pre-generation validation should be enabled in production")

    return errors

