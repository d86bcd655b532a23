"""
Configuration Layer

Application configuration with YAML and environment variable support.
"""

from futuna.config.settings import (
    AnalyzerSettings,
    ApplicationSettings,
    DatabaseSettings,
    FutunaConfig,
    OpenAISettings,
    get_config,
)

__all__ = [
    "FutunaConfig",
    "ApplicationSettings",
    "DatabaseSettings",
    "OpenAISettings",
    "AnalyzerSettings",
    "get_config",
]
