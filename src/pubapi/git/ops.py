"""Git operations via pygit2 - the small surface the checkout orchestrator needs."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pubapi.git._internal import CheckoutPlanner, RepoAccess, require_not_unborn
from pubapi.git.models import RepositoryState


class GitOps:
    """Thin wrapper around pygit2.Repository with cleaner error handling."""

    def __init__(self, repo_path: Path | str) -> None:
        self._access = RepoAccess(repo_path)
        self._checkout_planner = CheckoutPlanner(self._access)

    @property
    def path(self) -> Path:
        """Repository root path."""
        return self._access.path

    # =========================================================================
    # Read Operations
    # =========================================================================

    def resolve_commit(self, ref: str) -> str:
        """Full sha of the commit ``ref`` points to."""
        return str(self._access.resolve_commit(ref).id)

    def capture_state(self) -> RepositoryState:
        """Snapshot of HEAD for a later :meth:`restore`."""
        require_not_unborn(self._access, "capture repository state")
        return RepositoryState(
            branch=self._access.current_branch_name(),
            commit=str(self._access.must_head_commit().id),
        )

    def conflicting_paths(self, shas: Iterable[str]) -> list[str]:
        """Locally changed paths that checking out any of ``shas`` would touch."""
        local = self._access.local_changes()
        if not local:
            return []
        head = self._access.must_head_commit()
        touched: set[str] = set()
        for sha in shas:
            touched |= self._access.changed_paths(head, self._access.get_commit(sha))
        return sorted(local & touched)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def checkout_detached(self, sha: str, *, force: bool = False) -> None:
        """Check out a commit without moving any branch."""
        plan = self._checkout_planner.plan_target(sha)
        self._checkout_planner.execute(plan, force=force)

    def restore(self, state: RepositoryState, *, force: bool = False) -> None:
        """Return HEAD and the working tree to a captured state."""
        plan = self._checkout_planner.plan_restore(state)
        self._checkout_planner.execute(plan, force=force)
