"""Turns RawItems into SearchDocuments.

map_item() is pure: no I/O, no state. map_items() runs a whole pass worth of
items through it, resolving libraries in bulk first.
"""

import logging
from typing import Sequence

from pydantic import ValidationError

from services.media_index_sync.AncestorResolver import AncestorResolver
from services.media_index_sync.models.RawItem import RawItem
from shared.clients.search.models.SearchDocument import SearchDocument

LIST_SEPARATOR = "|"
VIRTUAL_PATH_PREFIX = "%"


def split_list(value: str | None) -> list[str] | None:
    """Split a "|"-joined source field.

    Args:
        value (str | None): e.g. "Action|Drama".

    Returns:
        list[str] | None: e.g. ["Action", "Drama"]; None (not []) for a missing or empty value.
    """
    if not value:
        return None
    return value.split(LIST_SEPARATOR)


def strip_virtual_path(path: str | None) -> str | None:
    """Virtual / placeholder paths start with "%" and must never reach the index."""
    if path is not None and path.startswith(VIRTUAL_PATH_PREFIX):
        return None
    return path


def map_item(item: RawItem, library_id: str | None) -> SearchDocument:
    """Build the search document for one item.

    Args:
        item (RawItem): The source record.
        library_id (str | None): The resolved library of the item.

    Returns:
        SearchDocument: The document to upsert.
    """
    document = SearchDocument(
        guid=item.id,
        type=item.type,
        parent_id=item.parent_id,
        library_id=library_id,
        name=item.name,
        overview=item.overview,
        original_title=item.original_title,
        series_name=item.series_name,
        production_year=item.production_year,
        artists=split_list(item.artists),
        album_artists=split_list(item.album_artists),
        genres=split_list(item.genres),
        studios=split_list(item.studios),
        tags=split_list(item.tags),
        is_folder=item.is_folder,
        community_rating=item.community_rating,
        critic_rating=item.critic_rating,
        path=item.path,
        tagline=item.tagline,
    )
    # applied last, once every other field is in place
    return document.model_copy(update={"path": strip_virtual_path(document.path)})


def map_items(items: Sequence[RawItem], logger: logging.Logger) -> tuple[list[SearchDocument], int]:
    """Map a full item set.

    Args:
        items (Sequence[RawItem]): Every item of the pass.
        logger (logging.Logger): Receives a warning per skipped item.

    Returns:
        tuple[list[SearchDocument], int]: The documents and the number of skipped items.
    """
    resolver = AncestorResolver.from_items(items)
    logger.debug("Resolved %d library roots among %d items.", len(resolver.library_ids), len(items))

    documents: list[SearchDocument] = []
    skipped = 0
    for item in items:
        try:
            documents.append(map_item(item, resolver.resolve(item)))
        except ValidationError as e:
            skipped += 1
            logger.warning("Skipping item id=%s: cannot build search document: %s", item.id, e)
    return documents, skipped
