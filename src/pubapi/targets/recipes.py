"""Recipes describing how to obtain one item collection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union


class DiffMode(Enum):
    """How diff operands are interpreted."""

    SMART = "smart"
    FILES = "files"
    REFERENCES = "references"
    PUBLISHED = "published"


@dataclass(frozen=True, slots=True)
class FromFile:
    """An existing API document on disk."""

    path: Path

    def describe(self) -> str:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class FromReference:
    """A git branch, tag, commit or relative expression such as ``HEAD~2``."""

    ref: str

    def describe(self) -> str:
        return self.ref


@dataclass(frozen=True, slots=True)
class FromPublished:
    """A version published on the package index."""

    name: str
    version: str

    def describe(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True, slots=True)
class FromCurrent:
    """The project as it currently is on disk."""

    manifest_path: Path

    def describe(self) -> str:
        return f"current ({self.manifest_path})"


CheckoutRecipe = Union[FromFile, FromReference, FromPublished, FromCurrent]
