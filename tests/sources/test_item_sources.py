import sqlite3
import uuid
from contextlib import closing

import pytest

from services.media_index_sync.sources.ItemSourceInterface import ItemSourceInterface
from services.media_index_sync.sources.ItemSourceManager import ItemSourceManager
from services.media_index_sync.sources.orm.ItemSourceOrm import ItemSourceOrm
from services.media_index_sync.sources.sqlite.ItemSourceSqlite import ItemSourceSqlite

LIBRARY = "6D5F0B6C-6E0E-4F7E-9B1B-3A4C0C1F0001"
MOVIE = "6D5F0B6C-6E0E-4F7E-9B1B-3A4C0C1F0002"


def _hex(guid: str) -> str:
    return uuid.UUID(guid).hex


def _create_database(path) -> None:
    with closing(sqlite3.connect(path)) as connection:
        connection.executescript(
            """
            CREATE TABLE BaseItems (
                Id TEXT PRIMARY KEY, Type TEXT, ParentId TEXT, Name TEXT, Overview TEXT,
                OriginalTitle TEXT, SeriesName TEXT, Tagline TEXT, ProductionYear INTEGER,
                CommunityRating REAL, CriticRating REAL, IsFolder INTEGER, Path TEXT,
                Genres TEXT, Studios TEXT, Tags TEXT, Artists TEXT, AlbumArtists TEXT
            );
            CREATE TABLE AncestorIds (
                ItemId TEXT NOT NULL, ParentItemId TEXT NOT NULL,
                PRIMARY KEY (ItemId, ParentItemId)
            );
            """
        )
        connection.executemany(
            "INSERT INTO BaseItems (Id, Type, Name, IsFolder, Path, Genres, ProductionYear, CommunityRating) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (LIBRARY, "MediaBrowser.Controller.Entities.CollectionFolder", "Movies", 1, "%AppDataPath%/root/movies", None, None, None),
                (MOVIE, "MediaBrowser.Controller.Entities.Movies.Movie", "Heat", 0, "/media/movies/Heat.mkv", "Action|Crime", 1995, 8.3),
            ],
        )
        connection.execute("INSERT INTO AncestorIds (ItemId, ParentItemId) VALUES (?, ?)", (MOVIE, LIBRARY))
        connection.commit()


@pytest.fixture
def database(tmp_path):
    path = tmp_path / "jellyfin.db"
    _create_database(path)
    return path


def _assert_items(items) -> None:
    by_id = {item.id: item for item in items}
    assert set(by_id) == {_hex(LIBRARY), _hex(MOVIE)}

    movie = by_id[_hex(MOVIE)]
    assert movie.ancestor_ids == (_hex(LIBRARY),)
    assert movie.name == "Heat"
    assert movie.genres == "Action|Crime"
    assert movie.production_year == 1995
    assert movie.community_rating == 8.3
    assert movie.is_folder is False

    library = by_id[_hex(LIBRARY)]
    assert library.is_folder is True
    assert library.ancestor_ids == ()


@pytest.mark.asyncio
async def test_sqlite_source_reads_items_and_ancestors(helper_config, database):
    source = ItemSourceSqlite(helper_config, db_path=str(database))
    status: dict[str, str] = {}

    items = await source.produce_items(status)

    _assert_items(items)
    assert status["Database"] == str(database)
    assert isinstance(source, ItemSourceInterface)


@pytest.mark.asyncio
async def test_sqlite_source_missing_database(helper_config, tmp_path):
    source = ItemSourceSqlite(helper_config, db_path=str(tmp_path / "missing.db"))

    with pytest.raises(FileNotFoundError):
        await source.produce_items({})


def test_sqlite_source_path_from_data_dir(helper_config, tmp_path, monkeypatch):
    monkeypatch.setenv("ITEM_SOURCE_DATA_PATH", str(tmp_path))
    source = ItemSourceSqlite(helper_config)
    assert source._db_path == str(tmp_path / "jellyfin.db")

    monkeypatch.setenv("ITEM_SOURCE_SQLITE_PATH", "/srv/library.db")
    assert ItemSourceSqlite(helper_config)._db_path == "/srv/library.db"


@pytest.mark.asyncio
async def test_orm_source_reads_items_and_ancestors(helper_config, database):
    source = ItemSourceOrm(helper_config, database_url=f"sqlite:///{database}")
    status: dict[str, str] = {}

    items = await source.produce_items(status)

    _assert_items(items)
    assert status["Database"].endswith("jellyfin.db")
    source.close()


def test_orm_location_hides_password(helper_config):
    source = ItemSourceOrm(helper_config, database_url="postgresql://jellyfin:secret@db:5432/jellyfin")
    assert "secret" not in source.get_location()


def test_manager_picks_configured_source(helper_config, tmp_path, monkeypatch):
    monkeypatch.setenv("ITEM_SOURCE_DATA_PATH", str(tmp_path))
    assert isinstance(ItemSourceManager(helper_config).get_source(), ItemSourceSqlite)

    monkeypatch.setenv("ITEM_SOURCE_ENGINE", "orm")
    assert isinstance(ItemSourceManager(helper_config).get_source(), ItemSourceOrm)


def test_manager_rejects_unknown_source(helper_config, monkeypatch):
    monkeypatch.setenv("ITEM_SOURCE_ENGINE", "mongodb")
    with pytest.raises(ValueError):
        ItemSourceManager(helper_config)
