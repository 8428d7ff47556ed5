"""Tests for core error types."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import pytest

from pubapi.core.errors import (
    ConfigError,
    DocumentError,
    ErrorCode,
    PubApiError,
    UsageError,
)


class TestErrorCodes:
    @pytest.mark.parametrize(
        ("code", "low", "high"),
        [
            (ErrorCode.USAGE_INVALID_OPERAND, 1000, 2000),
            (ErrorCode.CONFIG_PARSE_ERROR, 2000, 3000),
            (ErrorCode.DOCUMENT_UNREADABLE, 4000, 5000),
            (ErrorCode.POLICY_DENIED, 5000, 6000),
        ],
    )
    def test_ranges(self, code: ErrorCode, low: int, high: int) -> None:
        assert low <= code < high

    def test_codes_are_unique(self) -> None:
        values = [c.value for c in ErrorCode]
        assert len(values) == len(set(values))


class TestUsageError:
    def test_invalid_operand(self) -> None:
        err = UsageError.invalid_operand("x.json", "no such file")
        assert str(err) == "Invalid diff target 'x.json': no such file"
        assert err.code == ErrorCode.USAGE_INVALID_OPERAND
        assert err.details == {"operand": "x.json", "reason": "no such file"}

    def test_wrong_operand_count(self) -> None:
        err = UsageError.wrong_operand_count("--diff-from-files", "exactly 2 targets", 1)
        assert str(err) == "--diff-from-files requires exactly 2 targets, but 1 was provided"

    def test_is_exception(self) -> None:
        with pytest.raises(PubApiError):
            raise UsageError.invalid_combination("nope")


@contextmanager
def _cleanup(done: list[str]) -> Iterator[None]:
    try:
        yield
    finally:
        done.append("cleanup")


class TestContextManagers:
    @pytest.mark.parametrize(
        "err",
        [
            UsageError.wrong_operand_count("--diff", "1 or 2 targets", 3),
            DocumentError.unsupported_format(99),
            ConfigError.parse_error("x.yaml", "bad"),
        ],
    )
    def test_propagates_through_generator_context_manager(self, err: PubApiError) -> None:
        done: list[str] = []
        with pytest.raises(type(err)) as excinfo, _cleanup(done):
            raise err
        assert excinfo.value is err
        assert excinfo.value.__traceback__ is not None
        assert done == ["cleanup"]

    def test_fields_stay_frozen(self) -> None:
        err = UsageError.invalid_combination("nope")
        with pytest.raises(AttributeError):
            err.message = "changed"  # type: ignore[misc]


class TestSerialization:
    def test_to_dict(self) -> None:
        err = DocumentError.unsupported_format(7)
        assert err.to_dict() == {
            "code": 4002,
            "error": "DOCUMENT_UNSUPPORTED_FORMAT",
            "message": "Unsupported API document format version: 7",
            "details": {"format_version": "7"},
        }

    def test_config_error(self) -> None:
        err = ConfigError.invalid_value("registry.timeout_sec", -1, "must be positive")
        assert err.error_name == "CONFIG_INVALID_VALUE"
        assert "registry.timeout_sec" in str(err)

