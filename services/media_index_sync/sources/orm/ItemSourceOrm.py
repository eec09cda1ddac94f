"""Reads items through SQLModel entities instead of hand-written SQL."""

import asyncio
import os
from typing import Any

from sqlalchemy.engine import Engine, make_url
from sqlmodel import Session, create_engine, select

from services.media_index_sync.models.RawItem import RawItem
from services.media_index_sync.sources.ItemSourceInterface import (
    ITEM_COLUMNS,
    build_ancestor_map,
    build_raw_items,
)
from services.media_index_sync.sources.orm.entities import AncestorIdEntity, BaseItemEntity
from shared.helper.HelperConfig import HelperConfig

DATABASE_FILE = "jellyfin.db"


class ItemSourceOrm:
    """Item source backed by any database SQLAlchemy can talk to.

    The engine is created on first use and reused for later passes.
    """

    def __init__(self, helper_config: HelperConfig, database_url: str | None = None) -> None:
        self.logging = helper_config.get_logger()
        self._database_url = database_url or self._get_database_url_from_env(helper_config)
        self._engine: Engine | None = None

    @staticmethod
    def _get_database_url_from_env(helper_config: HelperConfig) -> str:
        """ITEM_SOURCE_ORM_URL, or a SQLite URL for jellyfin.db inside ITEM_SOURCE_DATA_PATH."""
        explicit = helper_config.get_override_val("ITEM_SOURCE_ORM_URL")
        if explicit:
            return explicit
        data_path = helper_config.get_string_val("ITEM_SOURCE_DATA_PATH")
        return f"sqlite:///{os.path.join(data_path, DATABASE_FILE)}"

    def _get_engine(self) -> Engine:
        if self._engine is None:
            connect_args = {"check_same_thread": False} if self._database_url.startswith("sqlite") else {}
            self._engine = create_engine(self._database_url, connect_args=connect_args)
        return self._engine

    def get_location(self) -> str:
        return make_url(self._database_url).render_as_string(hide_password=True)

    async def produce_items(self, status: dict[str, str]) -> list[RawItem]:
        status["Database"] = self.get_location()
        self.logging.info("Indexing items from database: %s", status["Database"])
        rows, edges = await asyncio.to_thread(self._read)
        items = build_raw_items(rows, build_ancestor_map(edges), self.logging)
        self.logging.info("Read %d items and %d ancestor links.", len(items), len(edges))
        return items

    def _read(self) -> tuple[list[dict[str, Any]], list[tuple[Any, Any]]]:
        with Session(self._get_engine()) as session:
            entities = session.exec(select(BaseItemEntity)).all()
            rows = [{field: getattr(entity, field) for field in ITEM_COLUMNS} for entity in entities]
            edges = [
                (edge.item_id, edge.parent_item_id)
                for edge in session.exec(select(AncestorIdEntity)).all()
            ]
        return rows, edges

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
