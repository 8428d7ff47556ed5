"""Config module exports."""

from pubapi.config.loader import load_config
from pubapi.config.models import (
    BuildConfig,
    DiffConfig,
    LoggingConfig,
    LogOutputConfig,
    PubApiConfig,
    RegistryConfig,
)

__all__ = [
    "load_config",
    "BuildConfig",
    "DiffConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "PubApiConfig",
    "RegistryConfig",
]
