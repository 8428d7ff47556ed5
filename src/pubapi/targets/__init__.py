"""Diff target resolution."""

from pubapi.targets.recipes import (
    CheckoutRecipe,
    DiffMode,
    FromCurrent,
    FromFile,
    FromPublished,
    FromReference,
)
from pubapi.targets.resolver import classify, parse_published, resolve

__all__ = [
    "CheckoutRecipe",
    "DiffMode",
    "FromCurrent",
    "FromFile",
    "FromPublished",
    "FromReference",
    "classify",
    "parse_published",
    "resolve",
]
