"""Canonical, comparable representation of one public declaration."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Classification of a signature fragment, used for rich rendering."""

    KEYWORD = "keyword"
    QUALIFIER = "qualifier"
    MODULE = "module"
    TYPE = "type"
    FUNCTION = "function"
    ATTRIBUTE = "attribute"
    IDENTIFIER = "identifier"
    SYMBOL = "symbol"
    ANNOTATION = "annotation"
    PLAIN = "plain"
    WHITESPACE = "whitespace"


@dataclass(frozen=True, slots=True)
class Token:
    """One classified text fragment of a rendered signature."""

    kind: TokenKind
    text: str


@functools.total_ordering
@dataclass(frozen=True, slots=True, eq=True)
class PublicItem:
    """A publicly reachable declaration at one point in time.

    ``path`` is the identity key used to match a declaration across two
    versions. ``prefix`` and ``suffix`` surround it in the rendered
    signature. ``tokens`` is None when tokenization failed; rendering then
    falls back to the plain signature.

    Ordering is by ``(path, rendered signature)`` so that items sharing a
    path sort next to each other. The token sequence is a final tie-break
    so the order agrees with equality.
    """

    path: str
    prefix: str = ""
    suffix: str = ""
    tokens: tuple[Token, ...] | None = None

    @classmethod
    def from_text(cls, path: str, prefix: str = "", suffix: str = "") -> PublicItem:
        return cls(path=path, prefix=prefix, suffix=suffix)

    @property
    def signature(self) -> str:
        return f"{self.prefix}{self.path}{self.suffix}"

    @property
    def sort_key(self) -> tuple[str, str, bool, tuple[tuple[str, str], ...]]:
        tokens = tuple((t.kind.value, t.text) for t in self.tokens or ())
        return (self.path, self.signature, self.tokens is not None, tokens)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PublicItem):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return self.signature
