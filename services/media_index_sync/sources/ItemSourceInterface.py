"""Contract every item data source has to satisfy.

A source produces the complete, ordered item set for one indexing pass. How it
gets there (raw SQL, an ORM, something else) is its own business; the
pipeline only sees RawItems.
"""

import logging
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

from pydantic import ValidationError

from services.media_index_sync.models.RawItem import RawItem, normalize_id

# RawItem field → column name in the BaseItems table
ITEM_COLUMNS: dict[str, str] = {
    "id": "Id",
    "type": "Type",
    "parent_id": "ParentId",
    "name": "Name",
    "overview": "Overview",
    "original_title": "OriginalTitle",
    "series_name": "SeriesName",
    "tagline": "Tagline",
    "production_year": "ProductionYear",
    "community_rating": "CommunityRating",
    "critic_rating": "CriticRating",
    "is_folder": "IsFolder",
    "path": "Path",
    "genres": "Genres",
    "studios": "Studios",
    "tags": "Tags",
    "artists": "Artists",
    "album_artists": "AlbumArtists",
}


@runtime_checkable
class ItemSourceInterface(Protocol):
    async def produce_items(self, status: dict[str, str]) -> list[RawItem]:
        """Return every item for one indexing pass.

        Args:
            status (dict[str, str]): Mutable status map; the source records where it reads
                from under the "Database" key.

        Returns:
            list[RawItem]: The items, in source order.

        Raises:
            Exception: Any data access failure; the pipeline reports the pass as failed.
        """
        ...


def build_ancestor_map(edges: Iterable[tuple[Any, Any]]) -> dict[str, list[str]]:
    """Group (item id, ancestor id) pairs by normalized item id."""
    ancestors: dict[str, list[str]] = {}
    for item_id, ancestor_id in edges:
        key = normalize_id(item_id)
        value = normalize_id(ancestor_id)
        if key is None or value is None:
            continue
        ancestors.setdefault(key, []).append(value)
    return ancestors


def build_raw_items(
    rows: Iterable[Mapping[str, Any]],
    ancestors: Mapping[str, list[str]],
    logger: logging.Logger,
) -> list[RawItem]:
    """Turn item rows keyed by RawItem field name into RawItems.

    Rows that cannot be turned into an item at all (no usable identifier) are
    logged and dropped.
    """
    items: list[RawItem] = []
    for row in rows:
        item_id = normalize_id(row.get("id"))
        try:
            items.append(RawItem.model_validate({**row, "ancestor_ids": ancestors.get(item_id or "", [])}))
        except ValidationError as e:
            logger.warning("Dropping item row with id=%r: %s", row.get("id"), e)
    return items
