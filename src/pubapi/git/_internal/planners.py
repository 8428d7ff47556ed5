"""Decision planners that separate "what to do" from "how to do it"."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from pubapi.git._internal.access import RepoAccess
from pubapi.git._internal.preconditions import require_local_branch
from pubapi.git.models import RepositoryState


class CheckoutType(Enum):
    """Types of checkout operations."""

    LOCAL_BRANCH = auto()
    DETACHED = auto()


@dataclass(frozen=True, slots=True)
class CheckoutPlan:
    """Plan for executing a checkout operation."""

    checkout_type: CheckoutType
    sha: str
    branch: str | None = None


class CheckoutPlanner:
    """Plans and executes checkouts of resolved commits and captured states."""

    def __init__(self, access: RepoAccess) -> None:
        self._access = access

    def plan_target(self, sha: str) -> CheckoutPlan:
        """Targets are always checked out detached so no branch moves."""
        return CheckoutPlan(CheckoutType.DETACHED, sha)

    def plan_restore(self, state: RepositoryState) -> CheckoutPlan:
        if state.branch is None:
            return CheckoutPlan(CheckoutType.DETACHED, state.commit)
        return CheckoutPlan(CheckoutType.LOCAL_BRANCH, state.commit, state.branch)

    def execute(self, plan: CheckoutPlan, *, force: bool = False) -> None:
        """Execute a checkout plan. Refs were resolved at plan time."""
        if plan.checkout_type == CheckoutType.LOCAL_BRANCH:
            assert plan.branch is not None  # CheckoutType guarantees this
            require_local_branch(self._access, plan.branch)
            self._access.checkout_branch(plan.branch, force=force)
        else:  # DETACHED
            self._access.checkout_detached(self._access.get_commit(plan.sha), force=force)
