"""Text rendering of item lists and diffs.

Plain rendering uses ``str(item)``. Colored rendering builds rich ``Text``
from the item's tokens and falls back to the plain signature when an item
has no tokens.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from rich.text import Text

from pubapi.diff.engine import ChangedPublicItem, PublicItemsDiff
from pubapi.items.models import PublicItem, TokenKind

T = TypeVar("T")
Line = str | Text
ItemFormatter = Callable[[PublicItem], Line]
Writer = Callable[[Line], None]


def _underlined(title: str) -> str:
    return f"{title}\n{'=' * len(title)}"


HEADER_REMOVED = _underlined("Removed items from the public API")
HEADER_CHANGED = _underlined("Changed items in the public API")
HEADER_ADDED = _underlined("Added items to the public API")

NOTHING = "(nothing)"

_TOKEN_STYLES: dict[TokenKind, str] = {
    TokenKind.KEYWORD: "blue",
    TokenKind.QUALIFIER: "blue",
    TokenKind.MODULE: "cyan",
    TokenKind.TYPE: "green",
    TokenKind.FUNCTION: "yellow",
    TokenKind.ATTRIBUTE: "cyan",
    TokenKind.ANNOTATION: "magenta",
}


def plain(item: PublicItem) -> Line:
    return str(item)


def colored(item: PublicItem) -> Line:
    """Rich text for one item, styled by token kind."""
    if item.tokens is None:
        return Text(str(item))
    text = Text()
    for token in item.tokens:
        text.append(token.text, style=_TOKEN_STYLES.get(token.kind, ""))
    return text


def _prefixed(marker: str, line: Line, style: str | None) -> Line:
    if isinstance(line, Text):
        return Text(marker, style=style or "").append_text(line)
    return f"{marker}{line}"


def _print_items_with_header(
    write: Writer,
    header: str,
    items: Sequence[T],
    print_fn: Callable[[Writer, T], None],
) -> None:
    write(header)
    if not items:
        write(NOTHING)
    else:
        for item in items:
            print_fn(write, item)
    write("")


def print_with_headers(
    diff: PublicItemsDiff,
    write: Writer,
    header_removed: str = HEADER_REMOVED,
    header_changed: str = HEADER_CHANGED,
    header_added: str = HEADER_ADDED,
    fmt: ItemFormatter = plain,
) -> None:
    """Write the three diff sections, one line per call to ``write``.

    The output format may change between releases.
    """

    def removed(w: Writer, item: PublicItem) -> None:
        w(_prefixed("-", fmt(item), "red"))

    def changed(w: Writer, change: ChangedPublicItem) -> None:
        w(_prefixed("-", fmt(change.old), "red"))
        w(_prefixed("+", fmt(change.new), "green"))

    def added(w: Writer, item: PublicItem) -> None:
        w(_prefixed("+", fmt(item), "green"))

    _print_items_with_header(write, header_removed, diff.removed, removed)
    _print_items_with_header(write, header_changed, diff.changed, changed)
    _print_items_with_header(write, header_added, diff.added, added)


def print_items(items: Sequence[PublicItem], write: Writer, fmt: ItemFormatter = plain) -> None:
    """Write items one per line in sorted order."""
    for item in sorted(items):
        write(fmt(item))
