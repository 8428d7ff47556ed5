"""Tests for the declaration model."""

from __future__ import annotations

import pytest

from pubapi.items import PublicItem, Token, TokenKind


def item(path: str, suffix: str = "", prefix: str = "") -> PublicItem:
    return PublicItem.from_text(path, prefix=prefix, suffix=suffix)


class TestSignature:
    def test_signature_concatenates_parts(self) -> None:
        i = PublicItem(path="pkg.f", prefix="def ", suffix="(x: int) -> str")
        assert i.signature == "def pkg.f(x: int) -> str"
        assert str(i) == i.signature

    def test_from_text_has_no_tokens(self) -> None:
        assert item("pkg.f").tokens is None


class TestEquality:
    def test_structural_equality(self) -> None:
        assert item("pkg.f", "(a)") == item("pkg.f", "(a)")

    def test_same_path_different_suffix_not_equal(self) -> None:
        assert item("pkg.f", "(a)") != item("pkg.f", "(b)")

    def test_tokens_participate_in_equality(self) -> None:
        with_tokens = PublicItem(
            path="pkg", prefix="module ", tokens=(Token(TokenKind.MODULE, "pkg"),)
        )
        assert with_tokens != item("pkg", prefix="module ")

    def test_hashable(self) -> None:
        assert len({item("a"), item("a"), item("b")}) == 2


class TestOrdering:
    def test_orders_by_path_first(self) -> None:
        # Prefix sorts after, but path decides
        assert item("a", prefix="z ") < item("b", prefix="a ")

    def test_same_path_orders_by_signature(self) -> None:
        assert item("pkg.f", "(a)") < item("pkg.f", "(b)")

    def test_items_sharing_a_path_are_adjacent(self) -> None:
        items = [item("pkg.g"), item("pkg.f", "(b)"), item("pkg.h"), item("pkg.f", "(a)")]
        paths = [i.path for i in sorted(items)]
        assert paths == ["pkg.f", "pkg.f", "pkg.g", "pkg.h"]

    def test_order_consistent_with_equality(self) -> None:
        plain = item("pkg", prefix="module ")
        rich = PublicItem(path="pkg", prefix="module ", tokens=(Token(TokenKind.MODULE, "x"),))
        assert plain != rich
        assert (plain < rich) != (rich < plain)

    @pytest.mark.parametrize(
        ("left", "right"),
        [
            (item("1"), item("2")),
            (item("a.b"), item("a.c")),
            (item("x", "(a)"), item("x", "(a, b)")),
        ],
    )
    def test_total_order_is_strict(self, left: PublicItem, right: PublicItem) -> None:
        assert left < right
        assert not right < left
        assert right > left

    def test_compare_with_other_type_is_not_implemented(self) -> None:
        with pytest.raises(TypeError):
            _ = item("a") < "a"  # type: ignore[operator]
