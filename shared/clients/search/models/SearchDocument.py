"""SearchDocument model: the canonical document shape pushed into the search index."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SearchDocument(BaseModel):
    """One media item as stored in the search index.

    Serialised with camelCase keys (model_dump(by_alias=True)), which are the
    attribute names the index settings refer to.

    Attributes:
        guid:             Primary key; normalized lowercase hyphenless hex.
        type:             Item type tag (e.g. "MediaBrowser.Controller.Entities.Movies.Movie").
        parent_id:        Identifier of the direct parent item.
        library_id:       Identifier of the enclosing library (collection folder), derived.
        name:             Display name.
        overview:         Plot / description text.
        original_title:   Title in the original language.
        series_name:      Name of the series for episodes and seasons.
        production_year:  Year of production.
        artists:          Track artists.
        album_artists:    Album artists.
        genres:           Genre names.
        studios:          Studio names.
        tags:             Free-form tags.
        is_folder:        Whether the item is a container.
        community_rating: Community rating, used as a ranking rule.
        critic_rating:    Critic rating, used as a ranking rule.
        path:             Filesystem path. Never a virtual ("%"-prefixed) path.
        tagline:          Short tagline.

    List fields are None when the source had no value, never an empty list.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    guid: str
    type: str | None = None
    parent_id: str | None = None
    library_id: str | None = None
    name: str | None = None
    overview: str | None = None
    original_title: str | None = None
    series_name: str | None = None
    production_year: int | None = None
    artists: list[str] | None = None
    album_artists: list[str] | None = None
    genres: list[str] | None = None
    studios: list[str] | None = None
    tags: list[str] | None = None
    is_folder: bool | None = None
    community_rating: float | None = None
    critic_rating: float | None = None
    path: str | None = None
    tagline: str | None = None

    def to_payload(self) -> dict:
        """Return the JSON-ready dict sent to the engine."""
        return self.model_dump(by_alias=True, mode="json")
