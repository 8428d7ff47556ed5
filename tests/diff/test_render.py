"""Tests for diff rendering."""

from __future__ import annotations

from rich.text import Text

from pubapi.diff import (
    HEADER_ADDED,
    HEADER_CHANGED,
    HEADER_REMOVED,
    PublicItemsDiff,
    colored,
    print_items,
    print_with_headers,
)
from pubapi.items import PublicItem, Token, TokenKind


def item(path: str, suffix: str = "") -> PublicItem:
    return PublicItem.from_text(path, suffix=suffix)


def render(diff: PublicItemsDiff, **kwargs: str) -> list[str]:
    lines: list[str] = []
    print_with_headers(diff, lambda line: lines.append(str(line)), **kwargs)
    return lines


class TestPrintWithHeaders:
    def test_empty_diff_prints_nothing_markers(self) -> None:
        lines = render(PublicItemsDiff())
        assert lines == [
            HEADER_REMOVED,
            "(nothing)",
            "",
            HEADER_CHANGED,
            "(nothing)",
            "",
            HEADER_ADDED,
            "(nothing)",
            "",
        ]

    def test_headers_are_underlined(self) -> None:
        assert HEADER_REMOVED == (
            "Removed items from the public API\n================================="
        )
        title, underline = HEADER_ADDED.split("\n")
        assert set(underline) == {"="}
        assert len(underline) == len(title)

    def test_item_lines(self) -> None:
        diff = PublicItemsDiff.between(
            [item("pkg.gone"), item("pkg.f", "(a)")],
            [item("pkg.f", "(a, b)"), item("pkg.new")],
        )
        lines = render(diff, header_removed="R", header_changed="C", header_added="A")
        assert lines == [
            "R",
            "-pkg.gone",
            "",
            "C",
            "-pkg.f(a)",
            "+pkg.f(a, b)",
            "",
            "A",
            "+pkg.new",
            "",
        ]

    def test_colored_lines_keep_markers(self) -> None:
        diff = PublicItemsDiff.between([], [item("pkg.x")])
        lines: list[object] = []
        print_with_headers(diff, lines.append, fmt=colored)
        added_line = lines[-2]
        assert isinstance(added_line, Text)
        assert added_line.plain == "+pkg.x"


class TestColored:
    def test_without_tokens_falls_back_to_plain_text(self) -> None:
        text = colored(item("pkg.f", "(a)"))
        assert isinstance(text, Text)
        assert text.plain == "pkg.f(a)"

    def test_tokens_are_styled(self) -> None:
        i = PublicItem(
            path="pkg",
            prefix="module ",
            tokens=(
                Token(TokenKind.KEYWORD, "module"),
                Token(TokenKind.WHITESPACE, " "),
                Token(TokenKind.MODULE, "pkg"),
            ),
        )
        text = colored(i)
        assert isinstance(text, Text)
        assert text.plain == "module pkg"
        assert len(text.spans) >= 2


class TestPrintItems:
    def test_sorted_one_per_line(self) -> None:
        lines: list[str] = []
        print_items([item("b"), item("a")], lambda line: lines.append(str(line)))
        assert lines == ["a", "b"]
