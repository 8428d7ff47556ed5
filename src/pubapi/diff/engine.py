"""Diff the public API between two versions of a library."""

from __future__ import annotations

import functools
from collections.abc import Iterable
from dataclasses import dataclass

from pubapi.items.models import PublicItem


@functools.total_ordering
@dataclass(frozen=True, slots=True)
class ChangedPublicItem:
    """An item whose path exists on both sides but whose signature differs."""

    old: PublicItem
    new: PublicItem

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ChangedPublicItem):
            return NotImplemented
        return (self.old, self.new) < (other.old, other.new)


@dataclass(frozen=True, slots=True)
class PublicItemsDiff:
    """Three sorted buckets: removed, changed and added items.

    Removed items are a MAJOR change in semver terms, added items a MINOR
    one. Changed items are usually MAJOR.
    """

    removed: tuple[PublicItem, ...] = ()
    changed: tuple[ChangedPublicItem, ...] = ()
    added: tuple[PublicItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.removed or self.changed or self.added)

    @classmethod
    def between(
        cls, old_items: Iterable[PublicItem], new_items: Iterable[PublicItem]
    ) -> PublicItemsDiff:
        """Diff two item collections.

        Items are never collapsed: two distinct declarations can render
        identically, so the collections are merged as sorted stacks instead
        of being compared as sets. Items are only moved between lists,
        never copied.
        """
        old_sorted = sorted(old_items)
        new_sorted = sorted(new_items)

        removed: list[PublicItem] = []
        changed: list[ChangedPublicItem] = []
        added: list[PublicItem] = []
        while old_sorted or new_sorted:
            if not new_sorted:
                removed.append(old_sorted.pop())
                continue
            if not old_sorted:
                added.append(new_sorted.pop())
                continue

            old = old_sorted.pop()
            new = new_sorted.pop()
            if old != new and old.path == new.path:
                changed.append(ChangedPublicItem(old=old, new=new))
            elif old < new:
                # Nothing left in old can match new
                added.append(new)
                old_sorted.append(old)
            elif old > new:
                removed.append(old)
                new_sorted.append(new)
            # else: unchanged

        return cls(
            removed=tuple(sorted(removed)),
            changed=tuple(sorted(changed)),
            added=tuple(sorted(added)),
        )

    def swapped(self) -> PublicItemsDiff:
        """The diff in the opposite direction."""
        return PublicItemsDiff(
            removed=self.added,
            changed=tuple(sorted(ChangedPublicItem(old=c.new, new=c.old) for c in self.changed)),
            added=self.removed,
        )
