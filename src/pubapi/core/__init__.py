"""Core module exports."""

from pubapi.core.errors import (
    ConfigError,
    DocumentError,
    ErrorCode,
    PubApiError,
    UsageError,
)
from pubapi.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "DocumentError",
    "ErrorCode",
    "PubApiError",
    "UsageError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_logger",
    "get_run_id",
    "set_run_id",
]
