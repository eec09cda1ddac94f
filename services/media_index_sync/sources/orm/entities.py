"""SQLModel mappings of the two media server tables the indexer reads."""

from sqlalchemy import Column, Float, Integer, String, Text, Boolean
from sqlmodel import Field, SQLModel


class BaseItemEntity(SQLModel, table=True):
    __tablename__ = "BaseItems"

    id: str = Field(sa_column=Column("Id", String, primary_key=True))
    type: str | None = Field(default=None, sa_column=Column("Type", String))
    parent_id: str | None = Field(default=None, sa_column=Column("ParentId", String))
    name: str | None = Field(default=None, sa_column=Column("Name", String))
    overview: str | None = Field(default=None, sa_column=Column("Overview", Text))
    original_title: str | None = Field(default=None, sa_column=Column("OriginalTitle", String))
    series_name: str | None = Field(default=None, sa_column=Column("SeriesName", String))
    tagline: str | None = Field(default=None, sa_column=Column("Tagline", String))
    production_year: int | None = Field(default=None, sa_column=Column("ProductionYear", Integer))
    community_rating: float | None = Field(default=None, sa_column=Column("CommunityRating", Float))
    critic_rating: float | None = Field(default=None, sa_column=Column("CriticRating", Float))
    is_folder: bool | None = Field(default=None, sa_column=Column("IsFolder", Boolean))
    path: str | None = Field(default=None, sa_column=Column("Path", String))
    genres: str | None = Field(default=None, sa_column=Column("Genres", String))
    studios: str | None = Field(default=None, sa_column=Column("Studios", String))
    tags: str | None = Field(default=None, sa_column=Column("Tags", String))
    artists: str | None = Field(default=None, sa_column=Column("Artists", String))
    album_artists: str | None = Field(default=None, sa_column=Column("AlbumArtists", String))


class AncestorIdEntity(SQLModel, table=True):
    """One edge of the precomputed ancestor closure: ParentItemId is an ancestor of ItemId."""

    __tablename__ = "AncestorIds"

    item_id: str = Field(sa_column=Column("ItemId", String, primary_key=True))
    parent_item_id: str = Field(sa_column=Column("ParentItemId", String, primary_key=True))
