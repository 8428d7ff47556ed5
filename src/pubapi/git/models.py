"""Serializable data models for git operations."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RepositoryState:
    """Where HEAD pointed before any checkout: a branch, or a bare commit."""

    branch: str | None
    commit: str

    @property
    def is_detached(self) -> bool:
        return self.branch is None

    @property
    def short_sha(self) -> str:
        return self.commit[:7]

    def describe(self) -> str:
        if self.branch is None:
            return f"detached HEAD at {self.short_sha}"
        return f"branch {self.branch!r}"
