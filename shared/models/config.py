from pydantic import BaseModel, ConfigDict

from shared.helper.HelperConfig import HelperConfig

# order defines relevance weighting on the engine side
ATTRIBUTES_TO_SEARCH_ON = [
    "name",
    "overview",
    "originalTitle",
    "seriesName",
    "tagline",
    "genres",
    "studios",
    "tags",
    "artists",
    "albumArtists",
]
ATTRIBUTES_TO_SORT_ON = ["communityRating", "criticRating"]
ATTRIBUTES_TO_FILTER_ON = ["type", "parentId", "isFolder", "libraryId"]


class EnvConfig(BaseModel):
    """
    Represents a single configuration parameter required for a env setting.

    Attributes:
        env_key (str): The key/name of the environment variable to read.
        val_type (str): The expected type of the environment variable's value. Supported types are "string", "number" and "bool".
        default (str | int | float | bool | None): An optional default value if the environment variable is not set. If None, the variable is required and an error will be raised if it is not set.
    """

    env_key: str
    val_type: str
    default: str | int | float | bool | None = None


class IndexerConfig(BaseModel):
    """
    Connection and index settings for the search engine.

    Immutable: applying a new configuration replaces the previous value as a whole.
    url and api_key may be overridden by the MEILI_URL / MEILI_MASTER_KEY environment variables.

    Attributes:
        url (str | None): Base URL of the search engine (e.g. "http://meilisearch:7700").
        api_key (str | None): API key sent as bearer token, if the engine requires one.
        index_name (str | None): Target index. Falls back to the sanitized application name.

    The attribute lists (attributes_to_search_on, _sort_on, _filter_on) are read-only views of the
    fixed attribute contract, for query-side consumers. They cannot be configured.
    """

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    api_key: str | None = None
    index_name: str | None = None

    @property
    def attributes_to_search_on(self) -> list[str]:
        return list(ATTRIBUTES_TO_SEARCH_ON)

    @property
    def attributes_to_sort_on(self) -> list[str]:
        return list(ATTRIBUTES_TO_SORT_ON)

    @property
    def attributes_to_filter_on(self) -> list[str]:
        return list(ATTRIBUTES_TO_FILTER_ON)

    @classmethod
    def from_env(cls, helper_config: HelperConfig) -> "IndexerConfig":
        """Build the initial configuration from SEARCH_MEILISEARCH_* environment variables.

        Unset values stay None; connecting then reports "missing endpoint URL" instead of failing here.
        """
        return cls(
            url=helper_config.get_override_val("SEARCH_MEILISEARCH_BASE_URL"),
            api_key=helper_config.get_override_val("SEARCH_MEILISEARCH_API_KEY"),
            index_name=helper_config.get_override_val("SEARCH_MEILISEARCH_INDEX"),
        )
