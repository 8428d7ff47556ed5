"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
import textwrap
from collections.abc import Callable
from pathlib import Path

import pygit2
import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local pubapi package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of pubapi modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("pubapi"):
        del sys.modules[module_name]

EXAMPLE_FILES: dict[str, str] = {
    "src/example_api/__init__.py": '''
        """Example package."""
        from typing import Any

        from example_api._impl import Struct, helper
        from . import sub

        __all__ = ["Any", "MAX", "Missing", "Struct", "helper", "sub"]

        MAX: int = 3
    ''',
    "src/example_api/_impl.py": '''
        class Base:
            pass


        class Struct(Base):
            """A struct."""

            size: int = 0

            def __init__(self, size: int) -> None:
                self.size = size

            def _private(self):
                pass

            @property
            def area(self) -> int:
                return self.size

            @classmethod
            def create(cls) -> "Struct":
                return cls(0)

            @staticmethod
            def util(x):
                return x

            async def fetch(self, url: str) -> bytes:
                return b""


        def helper(a: int, b: str) -> str:
            return b * a
    ''',
    "src/example_api/sub.py": """
        from os.path import join

        x: int
        _hidden = 1


        def g():
            return join("a", "b")
    """,
}

EXAMPLE_SIGNATURES = [
    "module example_api",
    "use example_api.Any = typing.Any",
    "const example_api.MAX: int = 3",
    "class example_api.Struct(Base)",
    "def example_api.Struct.__init__(self, size: int) -> None",
    "@property def example_api.Struct.area -> int",
    "@classmethod def example_api.Struct.create(cls) -> 'Struct'",
    "async def example_api.Struct.fetch(self, url: str) -> bytes",
    "attr example_api.Struct.size: int",
    "@staticmethod def example_api.Struct.util(x)",
    "def example_api.helper(a: int, b: str) -> str",
    "module example_api.sub",
    "def example_api.sub.g()",
    "var example_api.sub.x: int",
]

ProjectFactory = Callable[..., Path]
CommitFn = Callable[..., str]


def project_files(
    files: dict[str, str] | None = None,
    name: str = "example-api",
    version: str = "1.0.0",
) -> dict[str, str]:
    """Relative path to text for a small project, pyproject.toml included."""
    out = {"pyproject.toml": f'[project]\nname = "{name}"\nversion = "{version}"\n'}
    for rel, text in (EXAMPLE_FILES if files is None else files).items():
        out[rel] = textwrap.dedent(text).lstrip()
    return out


def write_project(
    root: Path,
    files: dict[str, str] | None = None,
    name: str = "example-api",
    version: str = "1.0.0",
) -> Path:
    """Write a small project below ``root``; returns its pyproject.toml."""
    for rel, text in project_files(files, name, version).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return root / "pyproject.toml"


def commit_files(repo: pygit2.Repository, files: dict[str, str | None], message: str) -> str:
    """Write (or delete, for None) files and commit them on HEAD. Returns the sha."""
    workdir = Path(repo.workdir)
    for rel, text in files.items():
        path = workdir / rel
        if text is None:
            path.unlink()
            repo.index.remove(rel)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text)
            repo.index.add(rel)
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature("Test User", "test@example.com")
    parents = [] if repo.head_is_unborn else [repo.head.target]
    return str(repo.create_commit("HEAD", sig, sig, message, tree, parents))


def init_repo(path: Path) -> pygit2.Repository:
    path.mkdir(parents=True, exist_ok=True)
    repo = pygit2.init_repository(str(path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"
    return repo


@pytest.fixture
def make_project() -> ProjectFactory:
    """Factory for example projects."""
    return write_project


@pytest.fixture
def example_signatures() -> list[str]:
    return list(EXAMPLE_SIGNATURES)


@pytest.fixture
def commit() -> CommitFn:
    """Commit helper: ``commit(repo, {path: text or None}, message) -> sha``."""
    return commit_files


@pytest.fixture
def git_project(tmp_path: Path) -> pygit2.Repository:
    """The example project in a git repository.

    Tag ``v1`` has the example files; ``main`` is one commit ahead and adds
    ``example_api.sub.h`` while removing ``MAX`` from the root module.
    """
    repo = init_repo(tmp_path / "repo")
    v1 = commit_files(repo, project_files(), "v1")
    repo.references.create("refs/tags/v1", pygit2.Oid(hex=v1))

    init = project_files()["src/example_api/__init__.py"]
    sub = project_files()["src/example_api/sub.py"]
    commit_files(
        repo,
        {
            "src/example_api/__init__.py": init.replace('"MAX", ', "").replace(
                "MAX: int = 3\n", ""
            ),
            "src/example_api/sub.py": sub + "\n\ndef h(n: int) -> int:\n    return n\n",
        },
        "v2",
    )
    return repo
