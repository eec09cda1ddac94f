from abc import abstractmethod
import asyncio
import time

from shared.clients.ClientInterface import ClientInterface
from shared.clients.search.errors import SearchApiError, SearchError, SearchTaskFailedError
from shared.clients.search.models.IndexHandle import IndexHandle
from shared.clients.search.models.TaskInfo import TaskInfo


class SearchClientInterface(ClientInterface):
    """Full-text search engine client.

    Engine subclasses provide the endpoint paths and payload/response
    translation; the request flow lives here.
    """

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "search"
        """
        return "search"

    ################ CONFIG ##################
    def get_fetch_page_size(self) -> int:
        """Documents requested per page when listing an index."""
        return int(self.get_config_val("FETCH_PAGE_SIZE", default=1000, val_type="number"))

    def get_task_poll_interval(self) -> float:
        """Seconds between two polls of an enqueued task."""
        return float(self.get_config_val("TASK_POLL_INTERVAL", default=0.5, val_type="number"))

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_index(self, index_uid: str) -> str:
        """
        Returns the endpoint path of a single index (e.g. "/indexes/movies").
        """
        pass

    @abstractmethod
    def _get_endpoint_create_index(self) -> str:
        """
        Returns the endpoint path for index creation requests (e.g. "/indexes").
        """
        pass

    @abstractmethod
    def _get_endpoint_setting(self, index_uid: str, setting: str) -> str:
        """
        Returns the endpoint path for updating one index setting.

        Args:
            index_uid (str): The index name.
            setting (str): Generic setting name, one of "filterable", "sortable",
                "searchable", "displayed", "ranking".

        Raises:
            ValueError: If the setting is unknown to the engine.
        """
        pass

    @abstractmethod
    def _get_endpoint_documents(self, index_uid: str) -> str:
        """
        Returns the endpoint path for document upserts.
        """
        pass

    @abstractmethod
    def _get_endpoint_fetch_documents(self, index_uid: str) -> str:
        """
        Returns the endpoint path for paginated document listing.
        """
        pass

    @abstractmethod
    def _get_endpoint_delete_documents(self, index_uid: str) -> str:
        """
        Returns the endpoint path for deleting documents by primary key.
        """
        pass

    @abstractmethod
    def _get_endpoint_task(self, task_uid: int) -> str:
        """
        Returns the endpoint path for a single task.
        """
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_create_index_payload(self, index_uid: str, primary_key: str) -> dict:
        """Builds the request body for creating an index."""
        pass

    @abstractmethod
    def get_fetch_payload(self, fields: list[str], limit: int, offset: int) -> dict:
        """Builds the request body for one page of documents."""
        pass

    ################ RESPONSE PARSER ##################
    @abstractmethod
    def extract_health_status(self, raw_response: dict) -> str:
        """Returns the engine's self-reported health, e.g. "available"."""
        pass

    @abstractmethod
    def extract_index(self, raw_response: dict) -> IndexHandle:
        """Builds an IndexHandle from a get-index response."""
        pass

    @abstractmethod
    def extract_fetch_content(self, raw_response: dict) -> tuple[list[dict], int]:
        """Returns the documents of one page and the total document count."""
        pass

    def extract_task(self, raw_response: dict) -> TaskInfo:
        return TaskInfo.model_validate(raw_response)

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_get_health(self) -> str:
        """Query the engine health.

        Returns:
            str: The reported health status, e.g. "available".
        """
        resp = await self.do_healthcheck()
        return self.extract_health_status(resp.json())

    async def do_get_index(self, index_uid: str) -> IndexHandle | None:
        """Look up an index by name.

        Returns:
            IndexHandle | None: The index, or None if it does not exist.
        """
        try:
            resp = await self.do_request(method="GET", endpoint=self._get_endpoint_index(index_uid), raise_on_error=True)
        except SearchApiError as e:
            if e.status_code == 404:
                return None
            raise
        return self.extract_index(resp.json())

    async def do_create_index(self, index_uid: str, primary_key: str = "guid") -> TaskInfo:
        resp = await self.do_request(
            method="POST",
            json=self.get_create_index_payload(index_uid, primary_key),
            endpoint=self._get_endpoint_create_index(),
            raise_on_error=True,
        )
        return self.extract_task(resp.json())

    async def do_update_setting(self, index: IndexHandle, setting: str, values: list[str]) -> TaskInfo:
        """Replace one list-valued index setting.

        Args:
            index (IndexHandle): The target index.
            setting (str): Generic setting name (see _get_endpoint_setting()).
            values (list[str]): The complete new value; order is preserved.

        Returns:
            TaskInfo: The enqueued settings task.
        """
        resp = await self.do_request(
            method="PUT",
            json=list(values),
            endpoint=self._get_endpoint_setting(index.uid, setting),
            raise_on_error=True,
        )
        return self.extract_task(resp.json())

    async def do_add_documents(self, index: IndexHandle, documents: list[dict]) -> TaskInfo:
        """Upsert documents. Existing documents with the same primary key are replaced.

        Args:
            index (IndexHandle): The target index.
            documents (list[dict]): JSON-ready documents.

        Returns:
            TaskInfo: The enqueued indexing task.
        """
        resp = await self.do_request(
            method="POST",
            json=documents,
            params={"primaryKey": index.primary_key},
            endpoint=self._get_endpoint_documents(index.uid),
            raise_on_error=True,
        )
        return self.extract_task(resp.json())

    async def do_fetch_document_ids(self, index: IndexHandle, page_size: int | None = None) -> set[str]:
        """Collect the primary keys of ALL documents in the index, paginating automatically.

        Args:
            index (IndexHandle): The index to list.
            page_size (int | None): Documents per request, defaults to FETCH_PAGE_SIZE.

        Returns:
            set[str]: Every primary key currently stored.
        """
        page_size = page_size or self.get_fetch_page_size()
        ids: set[str] = set()
        offset = 0
        while True:
            resp = await self.do_request(
                method="POST",
                json=self.get_fetch_payload([index.primary_key], page_size, offset),
                endpoint=self._get_endpoint_fetch_documents(index.uid),
                raise_on_error=True,
            )
            documents, total = self.extract_fetch_content(resp.json())
            for document in documents:
                key = document.get(index.primary_key)
                if key is not None:
                    ids.add(str(key))
            offset += len(documents)
            self.logging.debug("Fetched %d of %d document ids from index '%s'", offset, total, index.uid)
            if not documents or offset >= total:
                break
        return ids

    async def do_delete_documents(self, index: IndexHandle, document_ids: list[str]) -> TaskInfo:
        resp = await self.do_request(
            method="POST",
            json=list(document_ids),
            endpoint=self._get_endpoint_delete_documents(index.uid),
            raise_on_error=True,
        )
        return self.extract_task(resp.json())

    async def do_get_task(self, task_uid: int) -> TaskInfo:
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_task(task_uid), raise_on_error=True)
        return self.extract_task(resp.json())

    async def do_wait_for_task(self, task_uid: int, timeout: float = 60.0, interval: float | None = None) -> TaskInfo:
        """Poll a task until the engine has finished processing it.

        Args:
            task_uid (int): The task to wait for.
            timeout (float): Maximum seconds to wait.
            interval (float | None): Seconds between polls, defaults to TASK_POLL_INTERVAL.

        Returns:
            TaskInfo: The finished task (status "succeeded").

        Raises:
            SearchTaskFailedError: If the task failed or was canceled.
            SearchError: If the task did not finish within the timeout.
        """
        interval = interval or self.get_task_poll_interval()
        deadline = time.monotonic() + timeout
        while True:
            task = await self.do_get_task(task_uid)
            if task.is_finished():
                if task.status != "succeeded":
                    message = (task.error or {}).get("message") or f"Task {task_uid} ended with status '{task.status}'"
                    raise SearchTaskFailedError(message, task_uid=task_uid)
                return task
            if time.monotonic() >= deadline:
                raise SearchError(f"Task {task_uid} did not finish within {timeout} seconds (status '{task.status}').")
            await asyncio.sleep(interval)
