"""Repository access layer - owns pygit2.Repository and exposes computed facts."""

from __future__ import annotations

from pathlib import Path

import pygit2

from pubapi.git._internal.constants import CHECKOUT_FORCE, CHECKOUT_SAFE, STATUS_UNCHANGED
from pubapi.git._internal.errors import git_operation
from pubapi.git._internal.parsing import extract_branch_name, make_branch_ref
from pubapi.git.errors import GitError, NotARepositoryError, RefNotFoundError


class RepoAccess:
    """Owns pygit2.Repository and provides normalized access to repo state."""

    def __init__(self, repo_path: Path | str) -> None:
        self._path = Path(repo_path)
        try:
            self._repo = pygit2.Repository(str(self._path))
        except pygit2.GitError as e:
            raise NotARepositoryError(str(self._path)) from e

    @property
    def repo(self) -> pygit2.Repository:
        return self._repo

    @property
    def path(self) -> Path:
        return Path(self._repo.workdir) if self._repo.workdir else self._path

    # =========================================================================
    # Repository State Facts
    # =========================================================================

    @property
    def is_unborn(self) -> bool:
        return self._repo.head_is_unborn

    @property
    def is_detached(self) -> bool:
        return self._repo.head_is_detached

    def head_commit(self) -> pygit2.Commit | None:
        if self.is_unborn:
            return None
        return self._repo.head.peel(pygit2.Commit)

    def must_head_commit(self) -> pygit2.Commit:
        commit = self.head_commit()
        if commit is None:
            raise GitError("HEAD has no commits (unborn branch)")
        return commit

    def current_branch_name(self) -> str | None:
        if self.is_unborn or self.is_detached:
            return None
        return extract_branch_name(self._repo.head.name)

    def has_local_branch(self, name: str) -> bool:
        return name in self._repo.branches.local

    # =========================================================================
    # Resolution Helpers
    # =========================================================================

    def resolve_commit(self, ref: str) -> pygit2.Commit:
        """Resolve branch, tag, sha or revision expression (``HEAD~2``) to a commit."""
        try:
            obj = self._repo.revparse_single(ref)
            commit = obj.peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError) as e:
            raise RefNotFoundError(ref) from e
        if not isinstance(commit, pygit2.Commit):
            raise RefNotFoundError(f"{ref} is not a commit")
        return commit

    def get_commit(self, sha: str) -> pygit2.Commit:
        obj = self._repo.get(sha)
        if not isinstance(obj, pygit2.Commit):
            raise RefNotFoundError(sha)
        return obj

    # =========================================================================
    # Low-level pygit2 Operations (all pygit2 quirks live here)
    # =========================================================================

    def local_changes(self) -> set[str]:
        """Paths with staged, unstaged or untracked changes."""
        with git_operation("status"):
            status = self._repo.status()
        return {path for path, flags in status.items() if flags & ~STATUS_UNCHANGED}

    def changed_paths(self, base: pygit2.Commit, target: pygit2.Commit) -> set[str]:
        """Paths that differ between two commits, on either side of a rename."""
        with git_operation("diff"):
            diff = base.tree.diff_to_tree(target.tree)
        paths: set[str] = set()
        for delta in diff.deltas:
            paths.add(delta.old_file.path)
            paths.add(delta.new_file.path)
        return paths

    def _force_checkout(self, commit: pygit2.Commit) -> None:
        """Overwrite only the paths that differ between HEAD and ``commit``.

        Local edits to any other path are left alone, as with a safe checkout.
        """
        paths = sorted(self.changed_paths(self.must_head_commit(), commit))
        # An empty path list would mean the whole tree
        if paths:
            self._repo.checkout_tree(commit, strategy=CHECKOUT_FORCE, paths=paths)

    def checkout_branch(self, name: str, *, force: bool = False) -> None:
        refname = make_branch_ref(name)
        with git_operation(f"checkout {name}"):
            if force:
                self._force_checkout(self._repo.branches.local[name].peel(pygit2.Commit))
            else:
                self._repo.checkout(refname, strategy=CHECKOUT_SAFE)
            self._repo.set_head(refname)

    def checkout_detached(self, commit: pygit2.Commit, *, force: bool = False) -> None:
        with git_operation(f"checkout {commit.short_id}"):
            if force:
                self._force_checkout(commit)
            else:
                self._repo.checkout_tree(commit, strategy=CHECKOUT_SAFE)
            self._repo.set_head(commit.id)
