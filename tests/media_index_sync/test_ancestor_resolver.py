from services.media_index_sync.AncestorResolver import AncestorResolver, is_library_root
from services.media_index_sync.models.RawItem import RawItem

LIBRARY = "00000000000000000000000000000001"
COLLECTION = "00000000000000000000000000000002"
MOVIE = "00000000000000000000000000000003"
ORPHAN = "00000000000000000000000000000004"

FOLDER_TYPE = "MediaBrowser.Controller.Entities.CollectionFolder"
MOVIE_TYPE = "MediaBrowser.Controller.Entities.Movies.Movie"


def _items() -> list[RawItem]:
    return [
        RawItem(id=LIBRARY, type=FOLDER_TYPE),
        RawItem(id=COLLECTION, type="MediaBrowser.Controller.Entities.Folder", ancestor_ids=[LIBRARY]),
        RawItem(id=MOVIE, type=MOVIE_TYPE, ancestor_ids=[COLLECTION, LIBRARY]),
        RawItem(id=ORPHAN, type=MOVIE_TYPE, ancestor_ids=[COLLECTION]),
    ]


def test_library_root_detection():
    assert is_library_root(RawItem(id=LIBRARY, type=FOLDER_TYPE))
    assert not is_library_root(RawItem(id=MOVIE, type=MOVIE_TYPE))
    assert not is_library_root(RawItem(id=MOVIE))


def test_direct_and_transitive_descendants_resolve_to_library():
    items = _items()
    resolver = AncestorResolver.from_items(items)

    assert resolver.library_ids == {LIBRARY}
    assert resolver.resolve(items[1]) == LIBRARY
    assert resolver.resolve(items[2]) == LIBRARY


def test_items_without_library_ancestor_resolve_to_none():
    items = _items()
    resolver = AncestorResolver.from_items(items)

    assert resolver.resolve(items[0]) is None
    assert resolver.resolve(items[3]) is None


def test_library_ids_given_in_any_notation():
    resolver = AncestorResolver(["00000000-0000-0000-0000-000000000001"])
    assert resolver.resolve(RawItem(id=MOVIE, ancestor_ids=[LIBRARY])) == LIBRARY
