"""Internal components for git operations - not part of public API."""

from pubapi.git._internal.access import RepoAccess
from pubapi.git._internal.parsing import extract_branch_name, make_branch_ref, short_sha
from pubapi.git._internal.planners import CheckoutPlan, CheckoutPlanner, CheckoutType
from pubapi.git._internal.preconditions import require_local_branch, require_not_unborn

__all__ = [
    "CheckoutPlan",
    "CheckoutPlanner",
    "CheckoutType",
    "RepoAccess",
    "extract_branch_name",
    "make_branch_ref",
    "require_local_branch",
    "require_not_unborn",
    "short_sha",
]
