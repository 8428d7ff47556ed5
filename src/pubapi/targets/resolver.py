"""Classify diff operands into recipes."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from pubapi.apidoc.manifest import read_project_name
from pubapi.core.errors import UsageError
from pubapi.targets.recipes import (
    CheckoutRecipe,
    DiffMode,
    FromCurrent,
    FromFile,
    FromPublished,
    FromReference,
)

log = structlog.get_logger()

PUBLISHED_PATTERN = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)?@(?P<version>[0-9A-Za-z.+!_-]+)$"
)

_MODE_FLAGS = {
    DiffMode.SMART: "--diff",
    DiffMode.FILES: "--diff-from-files",
    DiffMode.REFERENCES: "--diff-from-references",
    DiffMode.PUBLISHED: "--diff-from-published",
}

PackageName = str | Callable[[], str] | None


def _package_name(package_name: PackageName, operand: str) -> str:
    if callable(package_name):
        return package_name()
    if package_name:
        return package_name
    raise UsageError.invalid_operand(
        operand, "a bare @VERSION needs the project name"
    )


def parse_published(operand: str, package_name: PackageName = None) -> FromPublished | None:
    """``name@version`` or ``@version``; None when the operand has another shape."""
    m = PUBLISHED_PATTERN.match(operand)
    if m is None:
        return None
    name = m.group("name") or _package_name(package_name, operand)
    return FromPublished(name=name, version=m.group("version"))


def classify(operand: str, mode: DiffMode, package_name: PackageName = None) -> CheckoutRecipe:
    """Turn one operand into a recipe.

    Smart mode tries, in order: existing path, published specifier, git
    reference. Explicit modes force the recipe type and validate the operand.
    Git references are not resolved here; an unknown reference is reported
    by the checkout orchestrator before it touches the working tree.
    """
    if not operand:
        raise UsageError.invalid_operand(operand, "empty operand")

    if mode is DiffMode.FILES:
        path = Path(operand)
        if not path.is_file():
            raise UsageError.invalid_operand(operand, "no such file")
        return FromFile(path)
    if mode is DiffMode.REFERENCES:
        return FromReference(operand)
    if mode is DiffMode.PUBLISHED:
        published = parse_published(operand, package_name)
        if published is None:
            raise UsageError.invalid_operand(operand, "expected NAME@VERSION or @VERSION")
        return published
    if mode is DiffMode.SMART:
        path = Path(operand)
        if path.exists():
            return FromFile(path)
        published = parse_published(operand, package_name)
        if published is not None:
            return published
        return FromReference(operand)
    raise ValueError(f"Unknown diff mode: {mode}")


def resolve(
    operands: Sequence[str],
    mode: DiffMode,
    manifest_path: Path,
) -> tuple[CheckoutRecipe, CheckoutRecipe]:
    """Recipes for the old and new side of a diff.

    Single-operand modes compare the operand against the current project.
    A bare ``@VERSION`` names the project of ``manifest_path``, which is
    only read when such an operand is present.

    Raises:
        UsageError: Wrong operand count or an invalid operand.
    """
    flag = _MODE_FLAGS[mode]
    count = len(operands)
    if mode in (DiffMode.FILES, DiffMode.REFERENCES):
        if count != 2:
            raise UsageError.wrong_operand_count(flag, "exactly 2 targets", count)
    elif mode is DiffMode.PUBLISHED:
        if count != 1:
            raise UsageError.wrong_operand_count(flag, "exactly 1 target", count)
    elif count not in (1, 2):
        raise UsageError.wrong_operand_count(flag, "1 or 2 targets", count)

    package_name: PackageName = lambda: read_project_name(manifest_path)
    recipes = [classify(op, mode, package_name) for op in operands]
    if len(recipes) == 1:
        recipes.append(FromCurrent(manifest_path))

    old, new = recipes
    log.debug("diff_targets_resolved", mode=mode.value, old=old.describe(), new=new.describe())
    return old, new
