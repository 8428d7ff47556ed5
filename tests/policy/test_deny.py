"""Tests for deny rule evaluation."""

from __future__ import annotations

import pytest

from pubapi.core.errors import ErrorCode, UsageError
from pubapi.diff import PublicItemsDiff
from pubapi.items import PublicItem
from pubapi.policy import (
    DenyPolicyError,
    DenyRule,
    enforce,
    evaluate,
    expand,
    require_diffing,
)


def item(path: str, suffix: str = "") -> PublicItem:
    return PublicItem.from_text(path, suffix=suffix)


@pytest.fixture
def full_diff() -> PublicItemsDiff:
    return PublicItemsDiff.between(
        [item("pkg.gone"), item("pkg.f", "(a)")],
        [item("pkg.f", "(a, b)"), item("pkg.new")],
    )


class TestExpand:
    def test_all_expands_to_every_bucket(self) -> None:
        assert expand(["all"]) == (DenyRule.ADDED, DenyRule.CHANGED, DenyRule.REMOVED)

    def test_deduplicates_and_orders(self) -> None:
        assert expand(["removed", "added", "removed"]) == (DenyRule.ADDED, DenyRule.REMOVED)

    def test_invalid_rule_rejected(self) -> None:
        with pytest.raises(ValueError):
            expand(["everything"])


class TestEvaluate:
    def test_all_against_empty_diff_passes(self) -> None:
        assert evaluate(PublicItemsDiff(), [DenyRule.ALL]).allowed

    def test_no_rules_always_pass(self, full_diff: PublicItemsDiff) -> None:
        assert evaluate(full_diff, []).allowed

    def test_all_against_non_empty_diff_fails(self, full_diff: PublicItemsDiff) -> None:
        verdict = evaluate(full_diff, [DenyRule.ALL])
        assert not verdict.allowed
        assert [v.rule for v in verdict.violations] == [
            DenyRule.ADDED,
            DenyRule.CHANGED,
            DenyRule.REMOVED,
        ]

    @pytest.mark.parametrize(
        ("diff", "rule"),
        [
            (PublicItemsDiff.between([], [item("a")]), "added"),
            (PublicItemsDiff.between([item("a", "(1)")], [item("a", "(2)")]), "changed"),
            (PublicItemsDiff.between([item("a")], []), "removed"),
        ],
    )
    def test_all_fails_for_any_single_bucket(self, diff: PublicItemsDiff, rule: str) -> None:
        verdict = evaluate(diff, ["all"])
        assert [v.rule.value for v in verdict.violations] == [rule]

    def test_unselected_bucket_passes(self) -> None:
        diff = PublicItemsDiff.between([], [item("pkg.new")])
        assert evaluate(diff, ["removed", "changed"]).allowed

    def test_violation_lists_items(self, full_diff: PublicItemsDiff) -> None:
        verdict = evaluate(full_diff, ["removed", "changed"])
        by_rule = {v.rule: v.items for v in verdict.violations}
        assert by_rule[DenyRule.REMOVED] == ("pkg.gone",)
        assert by_rule[DenyRule.CHANGED] == ("pkg.f(a) -> pkg.f(a, b)",)

    def test_message(self) -> None:
        diff = PublicItemsDiff.between([item("pkg.a"), item("pkg.b")], [])
        verdict = evaluate(diff, ["removed"])
        assert verdict.message == (
            "The API diff is not allowed as per --deny: "
            "Removed items not allowed: [pkg.a, pkg.b]"
        )


class TestEnforce:
    def test_raises_with_details(self, full_diff: PublicItemsDiff) -> None:
        with pytest.raises(DenyPolicyError) as exc_info:
            enforce(full_diff, ["added"])
        assert exc_info.value.code == ErrorCode.POLICY_DENIED
        assert exc_info.value.details == {"added": ["pkg.new"]}
        assert "Added items not allowed: [pkg.new]" in str(exc_info.value)

    def test_passes_silently(self) -> None:
        enforce(PublicItemsDiff(), ["all"])


class TestRequireDiffing:
    def test_rules_outside_diff_mode_are_a_usage_error(self) -> None:
        with pytest.raises(UsageError, match="can only be used when diffing"):
            require_diffing(["all"], diffing=False)

    def test_rules_in_diff_mode_are_fine(self) -> None:
        require_diffing(["all"], diffing=True)

    def test_no_rules_outside_diff_mode_are_fine(self) -> None:
        require_diffing([], diffing=False)
