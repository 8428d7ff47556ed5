"""pubapi error types with typed error codes.

Error code ranges:
- 1xxx: Usage
- 2xxx: Config
- 4xxx: Document
- 5xxx: Policy

Git, build and registry failures have their own exception families in
``pubapi.git.errors``, ``pubapi.apidoc.errors`` and ``pubapi.registry.errors``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Usage (1xxx)
    USAGE_INVALID_COMBINATION = 1001
    USAGE_INVALID_OPERAND = 1002
    USAGE_WRONG_OPERAND_COUNT = 1003

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Document (4xxx)
    DOCUMENT_UNREADABLE = 4001
    DOCUMENT_UNSUPPORTED_FORMAT = 4002

    # Policy (5xxx)
    POLICY_DENIED = 5001


@dataclass(frozen=True)
class PubApiError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'POLICY_DENIED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return self.message


class UsageError(PubApiError):
    """Invalid flag combination or operand. Raised before any work starts."""

    @classmethod
    def invalid_combination(cls, reason: str) -> "UsageError":
        return cls(
            code=ErrorCode.USAGE_INVALID_COMBINATION,
            message=reason,
        )

    @classmethod
    def invalid_operand(cls, operand: str, reason: str) -> "UsageError":
        return cls(
            code=ErrorCode.USAGE_INVALID_OPERAND,
            message=f"Invalid diff target {operand!r}: {reason}",
            details={"operand": operand, "reason": reason},
        )

    @classmethod
    def wrong_operand_count(cls, mode: str, expected: str, got: int) -> "UsageError":
        return cls(
            code=ErrorCode.USAGE_WRONG_OPERAND_COUNT,
            message=f"{mode} requires {expected}, but {got} was provided",
            details={"mode": mode, "expected": expected, "got": got},
        )


class ConfigError(PubApiError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class DocumentError(PubApiError):
    """API document cannot be read at all.

    Incomplete documents are not errors; the extractor warns and continues.
    """

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "DocumentError":
        return cls(
            code=ErrorCode.DOCUMENT_UNREADABLE,
            message=f"Failed to read API document {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unsupported_format(cls, version: Any) -> "DocumentError":
        return cls(
            code=ErrorCode.DOCUMENT_UNSUPPORTED_FORMAT,
            message=f"Unsupported API document format version: {version!r}",
            details={"format_version": str(version)},
        )
