"""Precondition helpers for git operations."""

from __future__ import annotations

from pubapi.git._internal.access import RepoAccess
from pubapi.git.errors import GitError, UnbornHeadError


def require_not_unborn(access: RepoAccess, operation: str) -> None:
    """Raise if HEAD is unborn (no commits yet)."""
    if access.is_unborn:
        raise UnbornHeadError(operation)


def require_local_branch(access: RepoAccess, name: str) -> None:
    """Raise if a captured branch disappeared in the meantime."""
    if not access.has_local_branch(name):
        raise GitError(f"Branch {name!r} no longer exists")
