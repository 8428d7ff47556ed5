"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PUBAPI__SECTION__KEY)
3. Project YAML (.pubapi.yaml next to pyproject.toml)
4. Global YAML (~/.config/pubapi/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    PUBAPI__<SECTION>__<KEY>=<VALUE>

Examples:
    PUBAPI__LOGGING__LEVEL=DEBUG
    PUBAPI__DIFF__FORCE_CHECKOUTS=true
    PUBAPI__REGISTRY__INDEX_URL=https://test.pypi.org/pypi
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DenyName = Literal["all", "added", "changed", "removed"]
ColorChoice = Literal["auto", "always", "never"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PUBAPI__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Extraction warnings are emitted at WARNING.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DiffConfig(BaseModel):
    """Defaults for diff mode.

    Env vars:
        PUBAPI__DIFF__DENY: JSON list, e.g. '["removed", "changed"]'
        PUBAPI__DIFF__FORCE_CHECKOUTS: Discard local changes on checkout
        PUBAPI__DIFF__COLOR: auto, always or never
    """

    deny: list[DenyName] = Field(
        default_factory=list,
        description="Deny rules applied when diffing and none are given on the command line.",
    )
    force_checkouts: bool = Field(
        default=False,
        description="Force git checkouts even when local changes would be overwritten. "
        "RISK: uncommitted modifications to affected files are destroyed.",
    )
    color: ColorChoice = "auto"


class BuildConfig(BaseModel):
    """API document build configuration.

    Env vars:
        PUBAPI__BUILD__TARGET_DIR: Where API documents are written
    """

    target_dir: str | None = Field(
        default=None,
        description="Directory for generated API documents. A temporary directory when unset.",
    )


class RegistryConfig(BaseModel):
    """Package index configuration.

    Env vars:
        PUBAPI__REGISTRY__INDEX_URL: Base URL of a PyPI-compatible JSON API
        PUBAPI__REGISTRY__CACHE_DIR: Where published sources are unpacked
        PUBAPI__REGISTRY__TIMEOUT_SEC: HTTP timeout
    """

    index_url: str = Field(
        default="https://pypi.org/pypi",
        description="Base URL of the JSON API. Queried as {index_url}/{name}/{version}/json.",
    )
    cache_dir: str = Field(
        default_factory=lambda: str(Path("~/.cache/pubapi/registry").expanduser()),
    )
    timeout_sec: float = Field(default=30.0)

    @field_validator("index_url")
    @classmethod
    def validate_index_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Index URL must be http(s): {v}")
        return v.rstrip("/")

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Timeout must be positive, got {v}")
        return v


class PubApiConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
