"""Public item diffing and rendering."""

from pubapi.diff.engine import ChangedPublicItem, PublicItemsDiff
from pubapi.diff.render import (
    HEADER_ADDED,
    HEADER_CHANGED,
    HEADER_REMOVED,
    colored,
    plain,
    print_items,
    print_with_headers,
)

__all__ = [
    "ChangedPublicItem",
    "PublicItemsDiff",
    "HEADER_ADDED",
    "HEADER_CHANGED",
    "HEADER_REMOVED",
    "colored",
    "plain",
    "print_items",
    "print_with_headers",
]
