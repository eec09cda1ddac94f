import httpx

from shared.helper.HelperConfig import HelperConfig
from shared.clients.search.SearchClientInterface import SearchClientInterface


class SearchClientManager:
    """
    Resolves the configured search engine and builds clients for it.

    Unlike the other client types a search client is built per session, because URL and API key
    come from the applied IndexerConfig rather than from fixed env settings.
    """

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.engine = self._get_engine_from_env()
        self.client_class = self._resolve_client_class()

    def _get_engine_from_env(self) -> str:
        """Read the search engine name from env configuration.

        Returns:
            str: Capitalised engine name (e.g. "Meilisearch").
        """
        engine = self.helper_config.get_string_val("SEARCH_ENGINE", default="meilisearch")
        return engine.strip().lower().capitalize()

    def _resolve_client_class(self) -> type[SearchClientInterface]:
        """Import the client class for the configured engine.

        Returns:
            type[SearchClientInterface]: The client class.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        class_name = f"SearchClient{self.engine}"
        try:
            module = __import__(
                f"shared.clients.search.{self.engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            client_class = getattr(module, class_name)
            self.logging.debug("Resolved search client for engine: %s", self.engine)
            return client_class
        except (ImportError, AttributeError) as e:
            raise ValueError("Unsupported search engine '%s'. Error: %s" % (self.engine, e))

    async def create_client(
        self,
        base_url: str,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> SearchClientInterface:
        """Instantiate and boot a new client for the given endpoint.

        Args:
            base_url (str): The engine URL.
            api_key (str | None): The API key, if any.
            transport (httpx.AsyncBaseTransport | None): Custom transport, e.g. for tests.

        Returns:
            SearchClientInterface: A booted client, ready for requests.
        """
        client = self.client_class(
            helper_config=self.helper_config,
            base_url=base_url,
            api_key=api_key,
            transport=transport,
        )
        await client.boot()
        return client
