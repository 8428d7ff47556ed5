"""CI gating on API diffs."""

from pubapi.policy.deny import (
    DenyPolicyError,
    DenyRule,
    DenyVerdict,
    DenyViolation,
    enforce,
    evaluate,
    expand,
    require_diffing,
)

__all__ = [
    "DenyPolicyError",
    "DenyRule",
    "DenyVerdict",
    "DenyViolation",
    "enforce",
    "evaluate",
    "expand",
    "require_diffing",
]
