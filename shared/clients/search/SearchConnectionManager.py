"""Owner of the single shared session to the search engine.

Callers never touch a client directly; they hand an operation to execute(),
which runs it against the current session and, if the engine dropped away
in the meantime, reconnects once and retries once.
"""

import asyncio
import contextlib
from typing import Awaitable, Callable, TypeVar

import httpx

from shared.clients.search.IndexSchemaInitializer import IndexSchemaInitializer
from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.SearchClientManager import SearchClientManager
from shared.clients.search.errors import SearchCommunicationError, SearchUnavailableError
from shared.clients.search.models.IndexHandle import IndexHandle
from shared.clients.search.models.SearchSession import SearchSession
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import IndexerConfig

T = TypeVar("T")
Operation = Callable[[SearchClientInterface, IndexHandle], Awaitable[T]]

ENV_URL = "MEILI_URL"
ENV_API_KEY = "MEILI_MASTER_KEY"

STATUS_NOT_CONFIGURED = "not configured"
STATUS_MISSING_URL = "missing endpoint URL"
STATUS_DISCONNECTED = "disconnected"

RECONNECTABLE_ERRORS: tuple[type[BaseException], ...] = (
    SearchCommunicationError,
    httpx.TransportError,
    TimeoutError,
    asyncio.TimeoutError,
)


class SearchConnectionManager:
    def __init__(
        self,
        helper_config: HelperConfig,
        client_manager: SearchClientManager,
        schema_initializer: IndexSchemaInitializer,
        call_timeout: float | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self._client_manager = client_manager
        self._schema_initializer = schema_initializer
        self._call_timeout = call_timeout

        self._session: SearchSession | None = None
        self._last_configuration: IndexerConfig | None = None
        self._status = STATUS_NOT_CONFIGURED

        self._reconnect_lock = asyncio.Semaphore(1)
        self._reconnect_task: asyncio.Task | None = None
        self._retired_clients: list[SearchClientInterface] = []
        # operations currently running per client; a retired client is closed once its count drops to zero
        self._in_flight: dict[SearchClientInterface, int] = {}
        # session whose failure already triggered a reconnect attempt
        self._recovered_session: SearchSession | None = None

    ##########################################
    ################ GETTER ##################
    ##########################################

    @property
    def status(self) -> str:
        return self._status

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    @property
    def last_configuration(self) -> IndexerConfig | None:
        return self._last_configuration

    @staticmethod
    def is_reconnectable(error: BaseException) -> bool:
        """Transport failures and timeouts warrant a reconnect; API errors do not."""
        return isinstance(error, RECONNECTABLE_ERRORS)

    def _resolve_url(self, configuration: IndexerConfig) -> str | None:
        return self._helper_config.get_override_val(ENV_URL) or (configuration.url or "").strip() or None

    def _resolve_api_key(self, configuration: IndexerConfig) -> str | None:
        return self._helper_config.get_override_val(ENV_API_KEY) or configuration.api_key or None

    ##########################################
    ############### SESSION ##################
    ##########################################

    async def apply_configuration(self, configuration: IndexerConfig) -> None:
        """Connect with a new configuration. Never raises; the outcome is reported through status.

        Args:
            configuration (IndexerConfig): The configuration to apply. Cached for later reconnects
                whether or not connecting succeeds.
        """
        async with self._reconnect_lock:
            await self._establish(configuration)

    def disconnect(self) -> None:
        """Drop the current session. Safe to call repeatedly."""
        self._replace_session(None)
        self._status = STATUS_DISCONNECTED

    async def close(self) -> None:
        """Stop any pending background reconnect and release all HTTP clients.

        A client still serving an operation is closed as soon as that operation returns.
        """
        task = self._reconnect_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self.disconnect()
        await self._close_retired_clients()

    async def _establish(self, configuration: IndexerConfig) -> None:
        """Build a new session from scratch. Must be called with the reconnect lock held."""
        self._last_configuration = configuration

        url = self._resolve_url(configuration)
        if not url:
            self.logging.warning("Missing search engine URL (neither configured nor set via %s).", ENV_URL)
            self._replace_session(None)
            self._status = STATUS_MISSING_URL
            return

        client: SearchClientInterface | None = None
        try:
            client = await self._client_manager.create_client(url, self._resolve_api_key(configuration))
            index = await self._schema_initializer.initialize(client, configuration)
            health = await client.do_get_health()
        except Exception as e:
            self.logging.error("Failed to connect to search engine at %s: %s", url, e)
            self._replace_session(None)
            self._status = str(e) or e.__class__.__name__
            if client is not None:
                await client.close()
            await self._close_retired_clients()
            return

        self._replace_session(SearchSession(client=client, index=index))
        self._status = f"Server: {health}"
        self.logging.info("Connected to search engine at %s, index '%s' (%s).", url, index.uid, health)
        await self._close_retired_clients()

    def _replace_session(self, session: SearchSession | None) -> None:
        previous = self._session
        self._session = session
        if previous is not None and previous is not session:
            self._retired_clients.append(previous.client)

    async def _close_retired_clients(self) -> None:
        idle = [client for client in self._retired_clients if client not in self._in_flight]
        self._retired_clients = [client for client in self._retired_clients if client in self._in_flight]
        for client in idle:
            await client.close()

    ##########################################
    ############### RECONNECT ################
    ##########################################

    async def _reconnect(self, reason: str, failed_session: SearchSession | None = None) -> None:
        """Re-establish the session from the cached configuration.

        Args:
            reason (str): Logged with the attempt.
            failed_session (SearchSession | None): The session whose failure triggered this call. Only the
                first caller for a given session reconnects; later callers for the same session give up.
        """
        configuration = self._last_configuration
        if configuration is None:
            self.logging.debug("Skipping reconnect: no configuration cached (reason=%s)", reason)
            return

        async with self._reconnect_lock:
            # another caller may have reconnected while we waited for the lock
            if self.is_connected:
                return
            if failed_session is not None:
                if self._recovered_session is failed_session:
                    self.logging.debug("Skipping reconnect: already attempted for this session (reason=%s)", reason)
                    return
                self._recovered_session = failed_session
            self.logging.info("Reconnecting to search engine (reason=%s)", reason)
            await self._establish(configuration)

    def _schedule_background_reconnect(self, reason: str) -> None:
        if self._last_configuration is None:
            return
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        self._reconnect_task = asyncio.create_task(self._reconnect(reason))

    ##########################################
    ############### EXECUTE ##################
    ##########################################

    async def execute(self, operation: Operation[T]) -> T:
        """Run an operation against the live session.

        Args:
            operation: Async callable taking the client and the index handle.

        Returns:
            The operation's result.

        Raises:
            SearchUnavailableError: If not connected. A background reconnect is scheduled and
                the call returns immediately instead of waiting for it.
            Exception: The operation's error. Reconnectable errors are raised only after one
                reconnect and one retry have been tried (the retry's error, or the original
                error if reconnecting failed).
        """
        session = self._session
        if session is None:
            self._schedule_background_reconnect("execute called while not connected")
            raise SearchUnavailableError(f"Search engine not connected ({self._status}).")

        try:
            return await self._run(operation, session)
        except Exception as e:
            if not self.is_reconnectable(e):
                raise
            self.logging.warning("Search request failed (%s: %s); resetting session and reconnecting.", e.__class__.__name__, e)
            if self._session is session:
                self.disconnect()
            await self._reconnect("request failed", failed_session=session)
            retry_session = self._session
            if retry_session is None:
                raise
        return await self._run(operation, retry_session)

    async def _run(self, operation: Operation[T], session: SearchSession) -> T:
        client = session.client
        self._in_flight[client] = self._in_flight.get(client, 0) + 1
        try:
            if self._call_timeout:
                return await asyncio.wait_for(operation(client, session.index), timeout=self._call_timeout)
            return await operation(client, session.index)
        finally:
            await self._release(client)

    async def _release(self, client: SearchClientInterface) -> None:
        remaining = self._in_flight.pop(client) - 1
        if remaining:
            self._in_flight[client] = remaining
        elif client in self._retired_clients:
            # last operation on a replaced session
            self._retired_clients.remove(client)
            await client.close()
