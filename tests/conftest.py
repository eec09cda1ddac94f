"""
Pytest configuration and shared fixtures for the media index bridge tests.
"""
import json
import logging

import httpx
import pytest

from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.SearchClientManager import SearchClientManager
from shared.helper.HelperConfig import HelperConfig

# every variable the code under test reads, cleared so the host environment cannot leak in
_ENV_KEYS = (
    "MEILI_URL",
    "MEILI_MASTER_KEY",
    "SEARCH_ENGINE",
    "SEARCH_TIMEOUT",
    "SEARCH_CALL_TIMEOUT",
    "SEARCH_MEILISEARCH_BASE_URL",
    "SEARCH_MEILISEARCH_API_KEY",
    "SEARCH_MEILISEARCH_INDEX",
    "SEARCH_MEILISEARCH_FETCH_PAGE_SIZE",
    "SEARCH_MEILISEARCH_TASK_POLL_INTERVAL",
    "INDEX_BATCH_SIZE",
    "INDEX_CLEANUP_ORPHANS",
    "INDEX_WAIT_FOR_TASKS",
    "INDEX_TASK_TIMEOUT",
    "ITEM_SOURCE_ENGINE",
    "ITEM_SOURCE_SQLITE_PATH",
    "ITEM_SOURCE_ORM_URL",
    "ITEM_SOURCE_DATA_PATH",
    "APP_NAME",
    "APP_API_KEY",
)


# ============================================================================
# Fake search engine
# ============================================================================

class FakeMeilisearch:
    """In-memory stand-in for the Meilisearch REST API, served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.indexes: dict[str, str] = {}
        self.documents: dict[str, dict[str, dict]] = {}
        self.settings: list[tuple[str, str, list]] = []
        self.requests: list[httpx.Request] = []
        self.health = "available"
        self.task_status = "succeeded"
        self.fail_with: Exception | None = None
        self._next_task = 0
        self.transport = httpx.MockTransport(self.handler)

    def add_index(self, uid: str, documents: list[dict] | None = None) -> None:
        self.indexes[uid] = "guid"
        self.documents[uid] = {doc["guid"]: doc for doc in documents or []}

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def _task(self, index_uid: str | None, task_type: str) -> httpx.Response:
        self._next_task += 1
        return httpx.Response(
            202,
            json={"taskUid": self._next_task, "indexUid": index_uid, "status": "enqueued", "type": task_type},
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with

        path = request.url.path
        parts = path.strip("/").split("/")
        body = json.loads(request.content) if request.content else None

        if path == "/health":
            return httpx.Response(200, json={"status": self.health})
        if parts[0] == "tasks":
            error = {"message": "document batch rejected", "code": "invalid_document"} if self.task_status == "failed" else None
            return httpx.Response(
                200,
                json={"uid": int(parts[1]), "status": self.task_status, "type": "documentAdditionOrUpdate", "error": error},
            )
        if path == "/indexes" and request.method == "POST":
            self.add_index(body["uid"])
            self.indexes[body["uid"]] = body["primaryKey"]
            return self._task(body["uid"], "indexCreation")

        uid = parts[1]
        if len(parts) == 2 and request.method == "GET":
            if uid not in self.indexes:
                return httpx.Response(404, json={"message": f"Index `{uid}` not found.", "code": "index_not_found"})
            return httpx.Response(200, json={"uid": uid, "primaryKey": self.indexes[uid]})
        if parts[2] == "settings":
            self.settings.append((uid, parts[3], body))
            return self._task(uid, "settingsUpdate")
        if parts[2] == "documents":
            stored = self.documents.setdefault(uid, {})
            if len(parts) == 3:
                primary_key = request.url.params.get("primaryKey", "guid")
                for document in body:
                    stored[document[primary_key]] = document
                return self._task(uid, "documentAdditionOrUpdate")
            if parts[3] == "fetch":
                everything = list(stored.values())
                page = everything[body["offset"]: body["offset"] + body["limit"]]
                return httpx.Response(200, json={
                    "results": [{field: doc.get(field) for field in body["fields"]} for doc in page],
                    "offset": body["offset"],
                    "limit": body["limit"],
                    "total": len(everything),
                })
            if parts[3] == "delete-batch":
                for key in body:
                    stored.pop(key, None)
                return self._task(uid, "documentDeletion")
        return httpx.Response(404, json={"message": f"Unknown route {path}", "code": "not_found"})


class MockTransportClientManager(SearchClientManager):
    """Builds real Meilisearch clients that talk to a FakeMeilisearch."""

    def __init__(self, helper_config: HelperConfig, fake: FakeMeilisearch) -> None:
        super().__init__(helper_config)
        self.fake = fake
        self.created: list[SearchClientInterface] = []

    async def create_client(self, base_url, api_key=None, transport=None) -> SearchClientInterface:
        client = await super().create_client(base_url, api_key, transport=self.fake.transport)
        self.created.append(client)
        return client


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def helper_config() -> HelperConfig:
    return HelperConfig(logger=logging.getLogger("tests"))


@pytest.fixture
def fake_meili() -> FakeMeilisearch:
    return FakeMeilisearch()


@pytest.fixture
def client_manager(helper_config, fake_meili) -> MockTransportClientManager:
    return MockTransportClientManager(helper_config, fake_meili)
