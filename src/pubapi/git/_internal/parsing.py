"""String parsing helpers for git ref names."""

from __future__ import annotations

_REFS_HEADS_PREFIX = "refs/heads/"


def extract_branch_name(refname: str) -> str | None:
    """Extract branch name from full ref (e.g., 'refs/heads/main' -> 'main')."""
    if refname.startswith(_REFS_HEADS_PREFIX):
        return refname[len(_REFS_HEADS_PREFIX) :]
    return None


def make_branch_ref(name: str) -> str:
    """Create full branch ref from name."""
    return f"{_REFS_HEADS_PREFIX}{name}"


def short_sha(sha: str) -> str:
    return sha[:7]
