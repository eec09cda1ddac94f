"""Reads items straight from the media server's SQLite database."""

import asyncio
import os
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any

from services.media_index_sync.models.RawItem import RawItem
from services.media_index_sync.sources.ItemSourceInterface import (
    ITEM_COLUMNS,
    build_ancestor_map,
    build_raw_items,
)
from shared.helper.HelperConfig import HelperConfig

DATABASE_FILE = "jellyfin.db"

ITEMS_QUERY = "SELECT {columns} FROM BaseItems".format(
    columns=", ".join(ITEM_COLUMNS.values())
)
ANCESTORS_QUERY = "SELECT ItemId, ParentItemId FROM AncestorIds"


class ItemSourceSqlite:
    """Item source issuing two plain queries: all items and all ancestor edges."""

    def __init__(self, helper_config: HelperConfig, db_path: str | None = None) -> None:
        self.logging = helper_config.get_logger()
        self._db_path = db_path or self._get_db_path_from_env(helper_config)

    @staticmethod
    def _get_db_path_from_env(helper_config: HelperConfig) -> str:
        """ITEM_SOURCE_SQLITE_PATH, or jellyfin.db inside ITEM_SOURCE_DATA_PATH."""
        explicit = helper_config.get_override_val("ITEM_SOURCE_SQLITE_PATH")
        if explicit:
            return explicit
        data_path = helper_config.get_string_val("ITEM_SOURCE_DATA_PATH")
        return os.path.join(data_path, DATABASE_FILE)

    async def produce_items(self, status: dict[str, str]) -> list[RawItem]:
        status["Database"] = self._db_path
        self.logging.info("Indexing items from database: %s", self._db_path)
        rows, edges = await asyncio.to_thread(self._read)
        items = build_raw_items(rows, build_ancestor_map(edges), self.logging)
        self.logging.info("Read %d items and %d ancestor links.", len(items), len(edges))
        return items

    def _read(self) -> tuple[list[dict[str, Any]], list[tuple[Any, Any]]]:
        if not os.path.exists(self._db_path):
            raise FileNotFoundError(f"Database not found: {self._db_path}")
        # read-only so a running media server is never disturbed
        uri = f"{Path(self._db_path).resolve().as_uri()}?mode=ro"
        with closing(sqlite3.connect(uri, uri=True)) as connection:
            fields = list(ITEM_COLUMNS.keys())
            rows = [dict(zip(fields, row)) for row in connection.execute(ITEMS_QUERY)]
            edges = [(row[0], row[1]) for row in connection.execute(ANCESTORS_QUERY)]
        return rows, edges
