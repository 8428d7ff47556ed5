"""Deny rules: turn a computed diff into a pass/fail verdict for CI."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from pubapi.core.errors import ErrorCode, PubApiError, UsageError
from pubapi.diff.engine import PublicItemsDiff


class DenyRule(Enum):
    """Diff categories that must be empty for the check to pass."""

    ALL = "all"
    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"


_CONCRETE_RULES = (DenyRule.ADDED, DenyRule.CHANGED, DenyRule.REMOVED)


def expand(rules: Iterable[DenyRule | str]) -> tuple[DenyRule, ...]:
    """Replace ``all`` by its parts; result is deduplicated and ordered."""
    selected = {DenyRule(r) for r in rules}
    if DenyRule.ALL in selected:
        return _CONCRETE_RULES
    return tuple(r for r in _CONCRETE_RULES if r in selected)


@dataclass(frozen=True, slots=True)
class DenyViolation:
    """One rule that matched, with the offending signatures in diff order."""

    rule: DenyRule
    items: tuple[str, ...]

    def __str__(self) -> str:
        return f"{self.rule.value.capitalize()} items not allowed: [{', '.join(self.items)}]"


@dataclass(frozen=True, slots=True)
class DenyVerdict:
    violations: tuple[DenyViolation, ...] = ()

    @property
    def allowed(self) -> bool:
        return not self.violations

    @property
    def message(self) -> str:
        details = ", ".join(str(v) for v in self.violations)
        return f"The API diff is not allowed as per --deny: {details}"


class DenyPolicyError(PubApiError):
    """The diff violates at least one deny rule. An expected CI outcome, not a crash."""

    @classmethod
    def from_verdict(cls, verdict: DenyVerdict) -> DenyPolicyError:
        return cls(
            code=ErrorCode.POLICY_DENIED,
            message=verdict.message,
            details={v.rule.value: list(v.items) for v in verdict.violations},
        )


def _offending(diff: PublicItemsDiff, rule: DenyRule) -> tuple[str, ...]:
    if rule is DenyRule.ADDED:
        return tuple(str(item) for item in diff.added)
    if rule is DenyRule.CHANGED:
        return tuple(f"{c.old} -> {c.new}" for c in diff.changed)
    if rule is DenyRule.REMOVED:
        return tuple(str(item) for item in diff.removed)
    raise ValueError(f"Unexpanded deny rule: {rule}")


def evaluate(diff: PublicItemsDiff, rules: Iterable[DenyRule | str]) -> DenyVerdict:
    violations = []
    for rule in expand(rules):
        items = _offending(diff, rule)
        if items:
            violations.append(DenyViolation(rule, items))
    return DenyVerdict(tuple(violations))


def enforce(diff: PublicItemsDiff, rules: Iterable[DenyRule | str]) -> None:
    """Raise DenyPolicyError if any selected bucket of the diff is non-empty."""
    verdict = evaluate(diff, rules)
    if not verdict.allowed:
        raise DenyPolicyError.from_verdict(verdict)


def require_diffing(rules: Iterable[DenyRule | str], diffing: bool) -> None:
    """Deny rules only make sense for a diff; reject them up front otherwise."""
    if not diffing and any(True for _ in rules):
        raise UsageError.invalid_combination("`--deny` can only be used when diffing")
