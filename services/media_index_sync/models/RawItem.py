"""RawItem model: one media item row as produced by an ItemSource."""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def normalize_id(value: Any) -> str | None:
    """Return the canonical form of an item identifier: lowercase hex without hyphens.

    Accepts GUID strings in any common notation, uuid.UUID instances and 16-byte
    GUID blobs (little-endian, as written by .NET). Other tokens are lowercased
    with hyphens removed.

    Args:
        value (Any): The raw identifier.

    Returns:
        str | None: The normalized identifier, or None for empty values.
    """
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value.hex
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        if len(raw) == 16:
            return uuid.UUID(bytes_le=raw).hex
        value = raw.decode("utf-8", errors="ignore")
    text = str(value).strip()
    if not text:
        return None
    try:
        return uuid.UUID(text).hex
    except ValueError:
        return text.lower().replace("-", "")


def _lenient(convert, value: Any) -> Any:
    if value is None or value == "":
        return None
    try:
        return convert(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in ("1", "true", "yes"):
        return True
    if text in ("0", "false", "no"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


class RawItem(BaseModel):
    """
    Denormalized item record with a fixed semantic shape, independent of the data source.

    Scalar values that cannot be interpreted (unparseable numbers, odd flags) become None
    instead of failing validation, so one broken row never aborts an indexing pass.
    Only a missing identifier is rejected.

    List-valued fields (genres, studios, tags, artists, album_artists) are kept as the
    "|"-joined source strings; splitting happens in the DocumentMapper.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: str | None = None
    parent_id: str | None = None
    ancestor_ids: tuple[str, ...] = ()

    name: str | None = None
    overview: str | None = None
    original_title: str | None = None
    series_name: str | None = None
    tagline: str | None = None
    production_year: int | None = None
    community_rating: float | None = None
    critic_rating: float | None = None
    is_folder: bool | None = None
    path: str | None = None

    genres: str | None = None
    studios: str | None = None
    tags: str | None = None
    artists: str | None = None
    album_artists: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_item_id(cls, value: Any) -> str:
        normalized = normalize_id(value)
        if normalized is None:
            raise ValueError("item identifier is missing")
        return normalized

    @field_validator("parent_id", mode="before")
    @classmethod
    def _normalize_parent_id(cls, value: Any) -> str | None:
        return normalize_id(value)

    @field_validator("ancestor_ids", mode="before")
    @classmethod
    def _normalize_ancestor_ids(cls, value: Any) -> tuple[str, ...]:
        if not value:
            return ()
        normalized = (normalize_id(v) for v in value)
        return tuple(v for v in normalized if v is not None)

    @field_validator(
        "type", "name", "overview", "original_title", "series_name", "tagline", "path",
        "genres", "studios", "tags", "artists", "album_artists",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8", errors="replace")
        return value if isinstance(value, str) else str(value)

    @field_validator("production_year", mode="before")
    @classmethod
    def _coerce_year(cls, value: Any) -> int | None:
        return _lenient(lambda v: int(float(v)), value)

    @field_validator("community_rating", "critic_rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float | None:
        return _lenient(float, value)

    @field_validator("is_folder", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool | None:
        return _lenient(_to_bool, value)
