"""Declaration model."""

from pubapi.items.models import PublicItem, Token, TokenKind

__all__ = ["PublicItem", "Token", "TokenKind"]
