"""Test fixtures for git module."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
import pytest

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

PKG_INIT = "src/pkg/__init__.py"


@pytest.fixture
def temp_repo(
    tmp_path: Path, commit: Callable[..., str]
) -> Generator[pygit2.Repository, None, None]:
    """Create a temporary git repository with initial commit."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()

    repo = pygit2.init_repository(str(repo_path), initial_head="main")

    # Configure user
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"

    commit(repo, {"README.md": "# Test Repo\n"}, "Initial commit")

    yield repo


@pytest.fixture
def tagged_repo(temp_repo: pygit2.Repository, commit: Callable[..., str]) -> pygit2.Repository:
    """Repository whose package changes between tags v1 and v2; main is at v2."""
    project = {"pyproject.toml": '[project]\nname = "pkg"\nversion = "0"\n'}
    v1 = commit(temp_repo, {**project, PKG_INIT: "def a(): pass\n"}, "v1")
    temp_repo.references.create("refs/tags/v1", pygit2.Oid(hex=v1))
    v2 = commit(temp_repo, {PKG_INIT: "def a(): pass\ndef b(): pass\n"}, "v2")
    temp_repo.references.create("refs/tags/v2", pygit2.Oid(hex=v2))
    return temp_repo


@pytest.fixture
def unborn_repo(tmp_path: Path) -> pygit2.Repository:
    return pygit2.init_repository(str(tmp_path / "unborn"), initial_head="main")
