"""Derives the enclosing library of every item from the ancestor relation."""

from typing import Iterable

from services.media_index_sync.models.RawItem import RawItem, normalize_id

LIBRARY_ROOT_TYPE = "CollectionFolder"


def is_library_root(item: RawItem) -> bool:
    """Libraries are the collection folders, e.g. "MediaBrowser.Controller.Entities.CollectionFolder"."""
    return item.type is not None and LIBRARY_ROOT_TYPE in item.type


class AncestorResolver:
    """Maps items to the library root among their ancestors.

    Built once per indexing pass: one pass over all items collects the library
    roots, then each item is resolved by a set lookup per ancestor. No per-item
    tree walking against the data source.
    """

    def __init__(self, library_ids: Iterable[str]) -> None:
        self._library_ids = frozenset(i for i in (normalize_id(v) for v in library_ids) if i)

    @classmethod
    def from_items(cls, items: Iterable[RawItem]) -> "AncestorResolver":
        return cls(item.id for item in items if is_library_root(item))

    @property
    def library_ids(self) -> frozenset[str]:
        return self._library_ids

    def resolve(self, item: RawItem) -> str | None:
        """Return the library id of an item, or None if none of its ancestors is a library.

        If several ancestors are libraries the first one found wins; the ancestor
        order is whatever the data source delivered and carries no meaning.
        """
        for ancestor_id in item.ancestor_ids:
            if ancestor_id in self._library_ids:
                return ancestor_id
        return None
