"""Safe, sequential checkouts of several commits in one working tree.

A comparison of two references has to materialize both in the single
working tree the user is sitting in. :class:`CheckoutOrchestrator` does
that without leaving a trace:

1. Every reference is resolved to a commit first, so relative expressions
   such as ``HEAD^`` refer to the original HEAD even for the second target,
   and an unknown reference fails before anything is touched.
2. Local changes to paths that a checkout would overwrite abort the run,
   unless ``force`` is set (in which case those changes are lost).
3. The current branch, or the exact commit when HEAD is detached, is
   captured and restored on every exit path by :class:`CheckoutSession`.

Targets are checked out detached and processed strictly one at a time.
The orchestrator is not reentrant. Instances for distinct repositories
are independent.
"""

from __future__ import annotations

import types
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TypeVar

import structlog

from pubapi.git._internal import short_sha
from pubapi.git.errors import DirtyWorkingTreeError, GitError, RestorationError
from pubapi.git.models import RepositoryState
from pubapi.git.ops import GitOps

log = structlog.get_logger()

T = TypeVar("T")


class CheckoutSession:
    """Captures repository state on enter and restores it on exit.

    Restoration runs on normal exit and on any exception, including
    KeyboardInterrupt and SystemExit. A failed restoration raises
    :class:`RestorationError`, which replaces the in-flight exception
    (kept as ``original``).
    """

    def __init__(self, ops: GitOps, *, force: bool = False) -> None:
        self._ops = ops
        self._force = force
        self._state: RepositoryState | None = None
        self.checkouts = 0

    @property
    def state(self) -> RepositoryState:
        if self._state is None:
            raise GitError("Checkout session has not been entered")
        return self._state

    def __enter__(self) -> CheckoutSession:
        self._state = self._ops.capture_state()
        log.debug("repository_state_captured", state=self._state.describe())
        return self

    def checkout(self, sha: str) -> None:
        self._ops.checkout_detached(sha, force=self._force)
        self.checkouts += 1
        log.debug("checked_out", sha=short_sha(sha))

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        state = self.state
        try:
            self._ops.restore(state, force=self._force)
        except (GitError, OSError) as e:
            log.error("restoration_failed", state=state.describe(), error=str(e))
            raise RestorationError(state, e, original=exc) from e
        log.debug("repository_state_restored", state=state.describe())


class CheckoutOrchestrator:
    """Materializes several git references one after the other."""

    def __init__(self, repo_path: Path | str, *, force: bool = False) -> None:
        self._ops = GitOps(repo_path)
        self._force = force
        self._running = False

    @property
    def path(self) -> Path:
        return self._ops.path

    def collect(self, refs: Sequence[str], extract: Callable[[str], T]) -> list[T]:
        """Check out each ref in turn and call ``extract(ref)`` while it is checked out.

        Returns the extraction results in ``refs`` order.

        Raises:
            RefNotFoundError: A ref does not resolve to a commit. Nothing was touched.
            DirtyWorkingTreeError: Local changes would be overwritten. Nothing was touched.
            RestorationError: The original state could not be restored.
        """
        if self._running:
            raise GitError("A checkout sequence is already running on this repository")
        self._running = True
        try:
            return self._collect(refs, extract)
        finally:
            self._running = False

    def _collect(self, refs: Sequence[str], extract: Callable[[str], T]) -> list[T]:
        shas = [self._ops.resolve_commit(ref) for ref in refs]
        log.debug("refs_resolved", refs=dict(zip(refs, shas, strict=True)))

        conflicts = self._ops.conflicting_paths(shas)
        if conflicts and not self._force:
            raise DirtyWorkingTreeError(conflicts)
        if conflicts:
            log.warning("discarding_local_changes", paths=conflicts)

        results: list[T] = []
        with CheckoutSession(self._ops, force=self._force) as session:
            for ref, sha in zip(refs, shas, strict=True):
                session.checkout(sha)
                results.append(extract(ref))
        return results
