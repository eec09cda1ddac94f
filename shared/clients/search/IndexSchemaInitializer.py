from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.IndexHandle import IndexHandle
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import (
    ATTRIBUTES_TO_FILTER_ON,
    ATTRIBUTES_TO_SEARCH_ON,
    ATTRIBUTES_TO_SORT_ON,
    IndexerConfig,
)

PRIMARY_KEY = "guid"

# relevance rules first, ratings only break ties between equally relevant hits
RANKING_RULES = [
    "words",
    "typo",
    "proximity",
    "attribute",
    "sort",
    "exactness",
    "communityRating:desc",
    "criticRating:desc",
]
EXTRA_DISPLAYED_ATTRIBUTES = ["guid", "type", "libraryId"]
DISPLAYED_ATTRIBUTES = ATTRIBUTES_TO_SEARCH_ON + EXTRA_DISPLAYED_ATTRIBUTES


class IndexSchemaInitializer:
    """Brings the target index to the attribute contract the documents are written for.

    Every step replaces a setting as a whole, so running it again on each new
    session is harmless.
    """

    def __init__(self, helper_config: HelperConfig, application_name: str) -> None:
        self.logging = helper_config.get_logger()
        self._application_name = application_name

    def resolve_index_name(self, configured_name: str | None) -> str:
        """Return the configured index name, or the application name with spaces replaced by hyphens.

        Args:
            configured_name (str | None): Index name from the configuration.

        Returns:
            str: The index name to use.
        """
        if configured_name and configured_name.strip():
            return configured_name.strip()
        return self._application_name.replace(" ", "-")

    async def initialize(self, client: SearchClientInterface, configuration: IndexerConfig) -> IndexHandle:
        """Resolve (or create) the index and apply all attribute settings.

        Args:
            client (SearchClientInterface): A booted client of the new session.
            configuration (IndexerConfig): Supplies the index name. The attribute settings are fixed.

        Returns:
            IndexHandle: The configured index.

        Raises:
            SearchError: If any engine call fails. The caller treats this like any other connect failure.
        """
        index_name = self.resolve_index_name(configuration.index_name)
        index = await client.do_get_index(index_name)
        if index is None:
            self.logging.info("Index '%s' does not exist yet, creating it.", index_name)
            await client.do_create_index(index_name, primary_key=PRIMARY_KEY)
            index = IndexHandle(uid=index_name, primary_key=PRIMARY_KEY)

        await client.do_update_setting(index, "filterable", ATTRIBUTES_TO_FILTER_ON)
        await client.do_update_setting(index, "sortable", ATTRIBUTES_TO_SORT_ON)
        await client.do_update_setting(index, "searchable", ATTRIBUTES_TO_SEARCH_ON)
        await client.do_update_setting(index, "displayed", DISPLAYED_ATTRIBUTES)
        await client.do_update_setting(index, "ranking", RANKING_RULES)

        self.logging.debug("Index '%s' schema applied.", index.uid)
        return index
