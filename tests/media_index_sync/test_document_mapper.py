import logging

from services.media_index_sync.DocumentMapper import map_item, map_items, split_list, strip_virtual_path
from services.media_index_sync.models.RawItem import RawItem

LIBRARY = "00000000000000000000000000000001"
MOVIE = "00000000000000000000000000000003"


def test_split_list():
    assert split_list("A|B|C") == ["A", "B", "C"]
    assert split_list("Drama") == ["Drama"]


def test_split_list_empty_is_none_not_empty_list():
    assert split_list("") is None
    assert split_list(None) is None


def test_virtual_paths_are_dropped():
    assert strip_virtual_path("%MetadataPath%/movies/x") is None
    assert strip_virtual_path("/media/movies/Heat (1995)/Heat.mkv") == "/media/movies/Heat (1995)/Heat.mkv"
    assert strip_virtual_path(None) is None


def test_map_item_copies_fields_and_library():
    item = RawItem(
        id=MOVIE,
        type="MediaBrowser.Controller.Entities.Movies.Movie",
        parent_id=LIBRARY,
        name="Heat",
        original_title="Heat",
        production_year=1995,
        genres="Action|Crime|Drama",
        studios="Warner Bros.",
        community_rating=8.3,
        is_folder=False,
        path="/media/movies/Heat.mkv",
        tagline="A Los Angeles crime saga",
    )

    document = map_item(item, LIBRARY)

    assert document.guid == MOVIE
    assert document.library_id == LIBRARY
    assert document.parent_id == LIBRARY
    assert document.genres == ["Action", "Crime", "Drama"]
    assert document.studios == ["Warner Bros."]
    assert document.tags is None
    assert document.artists is None
    assert document.path == "/media/movies/Heat.mkv"
    assert document.production_year == 1995


def test_map_item_drops_virtual_path():
    document = map_item(RawItem(id=MOVIE, path="%AppDataPath%/collections"), None)
    assert document.path is None
    assert document.library_id is None


def test_payload_uses_index_attribute_names():
    payload = map_item(RawItem(id=MOVIE, series_name="Dark", album_artists="A|B"), LIBRARY).to_payload()

    assert payload["guid"] == MOVIE
    assert payload["libraryId"] == LIBRARY
    assert payload["seriesName"] == "Dark"
    assert payload["albumArtists"] == ["A", "B"]
    assert payload["genres"] is None
    assert "library_id" not in payload


def test_map_items_resolves_libraries_for_the_whole_pass():
    items = [
        RawItem(id=LIBRARY, type="CollectionFolder"),
        RawItem(id=MOVIE, ancestor_ids=[LIBRARY]),
    ]

    documents, skipped = map_items(items, logging.getLogger("tests"))

    assert skipped == 0
    assert [d.guid for d in documents] == [LIBRARY, MOVIE]
    assert documents[1].library_id == LIBRARY
