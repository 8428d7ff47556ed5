"""Turn an API document into the list of public items.

The walk starts at the document root and follows module and class members,
so every item is reported at the path a user would import it from. Items
that are re-exported appear at the re-exporting path, together with their
own members.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import structlog

from pubapi.apidoc.builder import FORMAT_VERSION
from pubapi.core.errors import DocumentError
from pubapi.items import PublicItem, Token, TokenKind

log = structlog.get_logger()

_PROPERTY_DECORATORS = frozenset(
    {"property", "functools.cached_property", "cached_property", "abc.abstractproperty"}
)
_PYTHON_KEYWORDS = frozenset({"None", "True", "False", "lambda", "async", "def", "class"})

_SUFFIX_TOKEN = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<arrow>->)
    |(?P<string>'[^']*'|"[^"]*")
    |(?P<number>\d[\w.]*)
    |(?P<name>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<symbol>.)
    """,
    re.VERBOSE | re.DOTALL,
)


def load_document(path: Path) -> dict[str, Any]:
    """Read and validate a JSON API document.

    Raises:
        DocumentError: The file cannot be read, is not JSON, or has an
            unsupported format version.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError.unreadable(str(path), e.strerror or str(e)) from e
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError.unreadable(str(path), f"invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise DocumentError.unreadable(str(path), "top level is not an object")
    version = document.get("format_version")
    if version != FORMAT_VERSION:
        raise DocumentError.unsupported_format(version)
    if not isinstance(document.get("root"), str) or not isinstance(document.get("index"), dict):
        raise DocumentError.unreadable(str(path), "missing 'root' or 'index'")
    return document


def public_items(document: dict[str, Any]) -> list[PublicItem]:
    """All public items of a document, sorted."""
    return sorted(_Walker(document).walk())


def items_from_file(path: Path) -> list[PublicItem]:
    return public_items(load_document(path))


# =============================================================================
# Rendering
# =============================================================================


def _function_prefix(entry: dict[str, Any]) -> tuple[str, bool]:
    """(prefix, is_property) for a function entry."""
    decorators = entry.get("decorators") or []
    keyword = "async def " if entry.get("is_async") else "def "
    if any(d in _PROPERTY_DECORATORS for d in decorators):
        return f"@property {keyword}", True
    for name in ("classmethod", "staticmethod"):
        if name in decorators:
            return f"@{name} {keyword}", False
    return keyword, False


def render(entry: dict[str, Any], path: str) -> tuple[str, str]:
    """(prefix, suffix) for an index entry shown at ``path``.

    Raises KeyError or TypeError on malformed entries.
    """
    kind = entry["kind"]
    if kind == "module":
        return "module ", ""
    if kind == "class":
        bases = entry.get("bases") or []
        return "class ", f"({', '.join(bases)})" if bases else ""
    if kind == "function":
        prefix, is_property = _function_prefix(entry)
        returns = entry.get("returns")
        arrow = f" -> {returns}" if returns else ""
        if is_property:
            return prefix, arrow
        return prefix, f"({entry['params']}){arrow}"
    if kind == "attribute":
        annotation = entry.get("annotation")
        value = entry.get("value")
        suffix = (f": {annotation}" if annotation else "") + (f" = {value}" if value else "")
        if entry.get("scope") == "class":
            return "attr ", suffix
        return ("const " if value else "var "), suffix
    raise KeyError(f"unknown entry kind {kind!r}")


_KIND_TOKENS = {
    "module": TokenKind.MODULE,
    "class": TokenKind.TYPE,
    "function": TokenKind.FUNCTION,
    "attribute": TokenKind.ATTRIBUTE,
    "use": TokenKind.IDENTIFIER,
}


def _prefix_tokens(prefix: str) -> list[Token]:
    tokens = []
    for part in re.split(r"(\s+)", prefix):
        if not part:
            continue
        if part.isspace():
            tokens.append(Token(TokenKind.WHITESPACE, part))
        elif part.startswith("@"):
            tokens.append(Token(TokenKind.ANNOTATION, part))
        else:
            tokens.append(Token(TokenKind.KEYWORD, part))
    return tokens


def _path_tokens(path: str, kind: str) -> list[Token]:
    segments = path.split(".")
    tokens = []
    for segment in segments[:-1]:
        tokens.append(Token(TokenKind.QUALIFIER, segment))
        tokens.append(Token(TokenKind.SYMBOL, "."))
    tokens.append(Token(_KIND_TOKENS[kind], segments[-1]))
    return tokens


def _suffix_tokens(suffix: str) -> list[Token]:
    tokens = []
    for m in _SUFFIX_TOKEN.finditer(suffix):
        text = m.group()
        group = m.lastgroup
        if group == "ws":
            kind = TokenKind.WHITESPACE
        elif group in ("arrow", "symbol"):
            kind = TokenKind.SYMBOL
        elif group in ("string", "number"):
            kind = TokenKind.PLAIN
        elif text in _PYTHON_KEYWORDS:
            kind = TokenKind.KEYWORD
        elif text[:1].isupper():
            kind = TokenKind.TYPE
        else:
            kind = TokenKind.IDENTIFIER
        tokens.append(Token(kind, text))
    return tokens


def tokenize(prefix: str, path: str, suffix: str, kind: str) -> tuple[Token, ...] | None:
    """Classify the rendered signature; None if the tokens do not reproduce it."""
    tokens = (*_prefix_tokens(prefix), *_path_tokens(path, kind), *_suffix_tokens(suffix))
    if "".join(t.text for t in tokens) != f"{prefix}{path}{suffix}":
        log.debug("tokenize_mismatch", path=path)
        return None
    return tokens


def _item(path: str, prefix: str, suffix: str, kind: str) -> PublicItem:
    return PublicItem(
        path=path, prefix=prefix, suffix=suffix, tokens=tokenize(prefix, path, suffix, kind)
    )


# =============================================================================
# Walking
# =============================================================================


class _Walker:
    def __init__(self, document: dict[str, Any]) -> None:
        self._root = document["root"]
        self._index: dict[str, Any] = document["index"]
        self._items: list[PublicItem] = []

    def _is_internal(self, item_id: str) -> bool:
        return item_id == self._root or item_id.startswith(f"{self._root}.")

    def walk(self) -> list[PublicItem]:
        if self._root not in self._index:
            log.warning("API document missing referenced item", id=self._root)
            return []
        self._visit(self._root, self._root, frozenset())
        return self._items

    def _visit(self, path: str, item_id: str, ancestors: frozenset[str]) -> None:
        entry = self._index.get(item_id)
        if entry is None:
            if self._is_internal(item_id.split("#", 1)[0]):
                log.warning("API document missing referenced item", id=item_id, path=path)
            else:
                # Re-export from another distribution
                self._items.append(_item(path, "use ", f" = {item_id}", "use"))
            return
        if item_id in ancestors:
            return

        try:
            prefix, suffix = render(entry, path)
            kind = entry["kind"]
        except (KeyError, TypeError) as e:
            log.warning("malformed API document entry", id=item_id, error=str(e))
            return
        self._items.append(_item(path, prefix, suffix, kind))

        members = entry.get("members") or []
        if not isinstance(members, list):
            log.warning("malformed API document entry", id=item_id, error="members is not a list")
            return
        for member in members:
            if not isinstance(member, dict) or not isinstance(member.get("name"), str):
                log.warning("malformed API document entry", id=item_id, error="bad member")
                continue
            self._visit(f"{path}.{member['name']}", str(member.get("id")), ancestors | {item_id})
