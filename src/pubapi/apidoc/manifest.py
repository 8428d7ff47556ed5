"""pyproject.toml reading and import package discovery."""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pubapi.apidoc.errors import (
    BuildIoError,
    ManifestParseError,
    MetadataError,
    VirtualManifestError,
)

MANIFEST_NAME = "pyproject.toml"
DYNAMIC_VERSION = "dynamic"


@dataclass(frozen=True, slots=True)
class Manifest:
    """What the builder needs to know about one package."""

    path: Path
    name: str
    version: str
    import_name: str
    source: Path  # package directory, or a single-module .py file

    @property
    def root(self) -> Path:
        return self.path.parent


def import_name_for(project_name: str) -> str:
    """Default import name for a distribution name ('my-lib' -> 'my_lib')."""
    return re.sub(r"[-.]+", "_", project_name)


def locate_package(root: Path, import_name: str, extra_bases: tuple[Path, ...] = ()) -> Path | None:
    """Find the package directory or single module for ``import_name``."""
    candidates = [import_name]
    if import_name.lower() != import_name:
        candidates.append(import_name.lower())
    for base in (*extra_bases, root / "src", root):
        for name in candidates:
            package = base / name
            if (package / "__init__.py").is_file():
                return package
            module = base / f"{name}.py"
            if module.is_file():
                return module
    return None


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise BuildIoError(path, e.strerror or str(e)) from e
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ManifestParseError(path, str(e)) from e


def _project_table(path: Path, data: dict[str, Any]) -> dict[str, Any]:
    project = data.get("project")
    if not isinstance(project, dict):
        raise VirtualManifestError(path)
    return project


def _configured_bases(root: Path, data: dict[str, Any]) -> tuple[Path, ...]:
    """Source roots declared through hatch or setuptools configuration."""
    tool = data.get("tool", {})
    bases: list[Path] = []
    hatch_packages = (
        tool.get("hatch", {}).get("build", {}).get("targets", {}).get("wheel", {}).get("packages")
    )
    if isinstance(hatch_packages, list):
        bases.extend((root / p).parent for p in hatch_packages if isinstance(p, str))
    package_dir = tool.get("setuptools", {}).get("package-dir")
    if isinstance(package_dir, dict) and isinstance(package_dir.get(""), str):
        bases.append(root / package_dir[""])
    return tuple(bases)


def _declared_import_name(data: dict[str, Any]) -> str | None:
    """`[tool.pubapi].import-name`, for projects whose import name differs."""
    value = data.get("tool", {}).get("pubapi", {}).get("import-name")
    return value if isinstance(value, str) and value else None


def read_project_name(path: Path) -> str:
    """``[project].name`` of a manifest."""
    project = _project_table(path, _load_toml(path))
    name = project.get("name")
    if not isinstance(name, str) or not name:
        raise MetadataError(path, "[project] has no name")
    return name


def read_manifest(path: Path, package: str | None = None) -> Manifest:
    """Read ``pyproject.toml`` and locate the import package it ships.

    Args:
        path: Path to pyproject.toml (or to its directory).
        package: Import name override when it differs from the project name.
    """
    path = Path(path)
    if path.is_dir():
        path = path / MANIFEST_NAME
    data = _load_toml(path)
    project = _project_table(path, data)

    name = project.get("name")
    if not isinstance(name, str) or not name:
        raise MetadataError(path, "[project] has no name")
    version = project.get("version")
    if not isinstance(version, str):
        version = DYNAMIC_VERSION

    import_name = package or _declared_import_name(data) or import_name_for(name)
    source = locate_package(path.parent, import_name, _configured_bases(path.parent, data))
    if source is None:
        raise MetadataError(
            path, f"cannot locate import package {import_name!r} for project {name!r}"
        )
    return Manifest(path=path, name=name, version=version, import_name=import_name, source=source)
