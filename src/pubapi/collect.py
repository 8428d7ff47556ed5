"""Turn recipes into item lists."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import httpx
import structlog

from pubapi.apidoc import BuildOptions, build, items_from_file, write_document
from pubapi.config.models import PubApiConfig
from pubapi.git import CheckoutOrchestrator, NotARepositoryError
from pubapi.items import PublicItem
from pubapi.registry import fetch_published
from pubapi.targets import (
    CheckoutRecipe,
    FromCurrent,
    FromFile,
    FromPublished,
    FromReference,
)

log = structlog.get_logger()


def find_repo_root(start_path: Path) -> Path:
    """Walk up from ``start_path`` to the directory holding ``.git``.

    Raises:
        NotARepositoryError: No ancestor contains ``.git``.
    """
    current = start_path.resolve()
    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent
    if (current / ".git").exists():
        return current
    raise NotARepositoryError(str(start_path))


@dataclass
class ItemCollector:
    """Materializes recipes for one project.

    ``manifest_path`` is the project's pyproject.toml. For git references it
    is re-read inside every checkout, at the same location relative to the
    repository root.
    """

    manifest_path: Path
    config: PubApiConfig
    force: bool = False
    package: str | None = None
    client: httpx.Client | None = None

    @property
    def build_options(self) -> BuildOptions:
        target_dir = self.config.build.target_dir
        return BuildOptions(
            target_dir=Path(target_dir) if target_dir else None, package=self.package
        )

    def collect(self, recipe: CheckoutRecipe) -> list[PublicItem]:
        """Items for a single recipe."""
        if isinstance(recipe, FromReference):
            return self._collect_references([recipe.ref])[0]
        return self._materialize(recipe)

    def collect_pair(
        self, old: CheckoutRecipe, new: CheckoutRecipe
    ) -> tuple[list[PublicItem], list[PublicItem]]:
        """Items for both sides of a diff.

        Everything that does not need a checkout is materialized first, so a
        ``FromCurrent`` side reflects the working tree as the user left it.
        All references then go through a single checkout sequence.
        """
        recipes = (old, new)
        results: list[list[PublicItem] | None] = [None, None]
        for i, recipe in enumerate(recipes):
            if not isinstance(recipe, FromReference):
                results[i] = self._materialize(recipe)

        positions = [i for i, r in enumerate(recipes) if isinstance(r, FromReference)]
        if positions:
            refs = [recipes[i].ref for i in positions]  # type: ignore[union-attr]
            for i, items in zip(positions, self._collect_references(refs), strict=True):
                results[i] = items

        old_items, new_items = results
        assert old_items is not None and new_items is not None
        return old_items, new_items

    def _materialize(self, recipe: CheckoutRecipe) -> list[PublicItem]:
        log.debug("collecting_items", recipe=recipe.describe())
        if isinstance(recipe, FromFile):
            return items_from_file(recipe.path)
        if isinstance(recipe, FromCurrent):
            return items_from_file(build(recipe.manifest_path, self.build_options))
        if isinstance(recipe, FromPublished):
            manifest = fetch_published(
                recipe.name,
                recipe.version,
                self.config.registry,
                client=self.client,
                package=self.package,
            )
            return items_from_file(write_document(manifest, self.build_options))
        if isinstance(recipe, FromReference):
            raise TypeError("git references are collected through a checkout sequence")
        raise TypeError(f"Unknown recipe: {recipe!r}")

    def _collect_references(self, refs: list[str]) -> list[list[PublicItem]]:
        repo_root = find_repo_root(self.manifest_path.parent)
        relative = self.manifest_path.resolve().relative_to(repo_root)
        orchestrator = CheckoutOrchestrator(repo_root, force=self.force)

        def extract(ref: str) -> list[PublicItem]:
            log.debug("collecting_items", ref=ref)
            return items_from_file(build(repo_root / relative, self.build_options))

        return orchestrator.collect(refs, extract)
