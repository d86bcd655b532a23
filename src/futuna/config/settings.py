"""
Pydantic settings models for Futuna configuration.

This module provides type-safe configuration with validation using Pydantic.
Configuration is loaded from config.yaml with environment variable substitution.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# Application Settings
# =============================================================================


class ApplicationSettings(BaseSettings):
    """Application metadata and environment configuration."""

    model_config = SettingsConfigDict(env_prefix="APP_")

    name: str = Field(default="Futuna")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is development or production."""
        if v not in ["development", "production"]:
            raise ValueError("environment must be 'development' or 'production'")
        return v


# =============================================================================
# Database Settings
# =============================================================================


class DatabaseSettings(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_", populate_by_name=True)

    database_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("database_url", "DATABASE_URL"),
    )
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    database: str = Field(default="futuna")
    username: str = Field(default="futuna")
    password: str = Field(default="")
    pool_size: int = Field(default=10)
    max_overflow: int = Field(default=20)
    echo: bool = Field(default=False)

    @property
    def url(self) -> str:
        """Explicit DATABASE_URL wins, otherwise build a PostgreSQL URL from parts."""
        if self.database_url:
            return self.database_url
        return f"postgresql://{self.username}:{self.password}@{self.host}:{self.port}/{self.database}"

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 0 < v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("pool_size", "max_overflow")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v


# =============================================================================
# OpenAI Settings
# =============================================================================


class OpenAISettings(BaseSettings):
    """Chat-completions endpoint used for ticker analysis."""

    model_config = SettingsConfigDict(env_prefix="OPENAI_")

    api_key: str = Field(default="")
    base_url: str = Field(default="https://api.openai.com/v1")
    model: str = Field(default="gpt-4o-mini")
    temperature: float = Field(default=0.2)
    timeout: int = Field(default=300)
    max_batch_size: int = Field(default=10)
    rate_limit_attempts: int = Field(default=3)
    rate_limit_delay_seconds: float = Field(default=2.0)

    @field_validator("max_batch_size", "rate_limit_attempts", "timeout")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("rate_limit_delay_seconds")
    @classmethod
    def validate_delay(cls, v: float) -> float:
        """Validate delay is not negative."""
        if v < 0:
            raise ValueError("rate_limit_delay_seconds must not be negative")
        return v


# =============================================================================
# Analyzer Settings
# =============================================================================


class AnalyzerSettings(BaseSettings):
    """Batching and concurrency for an analysis run."""

    model_config = SettingsConfigDict(env_prefix="ANALYZER_", populate_by_name=True)

    batch_size: int = Field(default=5)
    max_concurrency: int = Field(default=5)
    run_timeout_seconds: float = Field(default=1800.0)
    analyze_on_start: bool = Field(
        default=False,
        validation_alias=AliasChoices("analyze_on_start", "ANALYZE_ON_START"),
    )
    strict_enums: bool = Field(default=False)

    @field_validator("batch_size", "max_concurrency")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate value is positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("run_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate run deadline is positive."""
        if v <= 0:
            raise ValueError("run_timeout_seconds must be positive")
        return v


# =============================================================================
# Main Configuration
# =============================================================================


class FutunaConfig(BaseSettings):
    """
    Master configuration - single source of truth.

    Example:
        >>> config = FutunaConfig.from_yaml("config.yaml")
        >>> print(config.analyzer.batch_size)
        5
    """

    model_config = SettingsConfigDict(extra="allow")

    application: ApplicationSettings = Field(default_factory=ApplicationSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    analyzer: AnalyzerSettings = Field(default_factory=AnalyzerSettings)

    @classmethod
    def from_yaml(cls, config_path: str | Path = "config.yaml") -> "FutunaConfig":
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to config.yaml file (default: "config.yaml")

        Returns:
            Validated FutunaConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
            ValueError: If required environment variable is missing
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            yaml_content = f.read()

        # Pattern: ${VAR_NAME} or ${VAR_NAME:-default_value}
        def env_var_replacer(match):
            var_spec = match.group(1)
            if ":-" in var_spec:
                var_name, default = var_spec.split(":-", 1)
                return os.getenv(var_name, default)
            value = os.getenv(var_spec)
            if value is None:
                raise ValueError(f"Environment variable {var_spec} not set and no default provided")
            return value

        yaml_content = re.sub(r"\$\{([^}]+)\}", env_var_replacer, yaml_content)

        config_dict = yaml.safe_load(yaml_content) or {}

        return cls(**config_dict)


def get_config(config_path: str | Path = "config.yaml") -> FutunaConfig:
    """
    Load configuration, falling back to defaults and environment variables
    when the YAML file does not exist.
    """
    try:
        return FutunaConfig.from_yaml(config_path)
    except FileNotFoundError:
        return FutunaConfig()


__all__ = [
    "FutunaConfig",
    "ApplicationSettings",
    "DatabaseSettings",
    "OpenAISettings",
    "AnalyzerSettings",
    "get_config",
]
