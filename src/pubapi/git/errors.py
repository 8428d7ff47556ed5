"""Git module error types."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pubapi.git.models import RepositoryState


class GitError(Exception):
    """Base error for git operations."""

    pass


class NotARepositoryError(GitError):
    """No repository could be found."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No `.git` dir when starting from `{path}`")
        self.path = path


class RefNotFoundError(GitError):
    """Reference (branch, tag, commit, relative expression) not found."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference not found: {ref}")
        self.ref = ref


class UnbornHeadError(GitError):
    """HEAD has no commits yet."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Cannot {operation}: no commits yet")
        self.operation = operation


class DirtyWorkingTreeError(GitError):
    """Local changes would be overwritten by a checkout."""

    def __init__(self, paths: Sequence[str]) -> None:
        listing = "".join(f"\n\t{p}" for p in paths)
        super().__init__(
            "Your local changes to the following files would be overwritten by checkout:"
            f"{listing}\nCommit or stash them, or pass --force-checkouts to discard them."
        )
        self.paths = list(paths)


class RestorationError(GitError):
    """The working tree could not be returned to its original state.

    Raised in preference to whatever failure was in flight, which is kept
    as ``original``.
    """

    def __init__(
        self,
        state: RepositoryState,
        cause: BaseException,
        original: BaseException | None = None,
    ) -> None:
        message = f"Failed to restore repository to {state.describe()}: {cause}"
        if original is not None:
            message += f" (while handling: {original!r})"
        super().__init__(message)
        self.state = state
        self.cause = cause
        self.original = original
