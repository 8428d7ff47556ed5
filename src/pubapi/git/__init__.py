"""Git access for checking out references safely."""

from pubapi.git.errors import (
    DirtyWorkingTreeError,
    GitError,
    NotARepositoryError,
    RefNotFoundError,
    RestorationError,
    UnbornHeadError,
)
from pubapi.git.models import RepositoryState
from pubapi.git.ops import GitOps
from pubapi.git.orchestrator import CheckoutOrchestrator, CheckoutSession

__all__ = [
    "CheckoutOrchestrator",
    "CheckoutSession",
    "DirtyWorkingTreeError",
    "GitError",
    "GitOps",
    "NotARepositoryError",
    "RefNotFoundError",
    "RepositoryState",
    "RestorationError",
    "UnbornHeadError",
]
