from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.IndexHandle import IndexHandle
from shared.models.config import EnvConfig


class SearchClientMeilisearch(SearchClientInterface):

    _SETTING_PATHS = {
        "filterable": "filterable-attributes",
        "sortable": "sortable-attributes",
        "searchable": "searchable-attributes",
        "displayed": "displayed-attributes",
        "ranking": "ranking-rules",
    }

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Meilisearch"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="FETCH_PAGE_SIZE", val_type="number", default=1000),
            EnvConfig(env_key="TASK_POLL_INTERVAL", val_type="number", default=0.5),
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_endpoint_healthcheck(self) -> str:
        return "/health"

    def _get_endpoint_index(self, index_uid: str) -> str:
        return f"/indexes/{index_uid}"

    def _get_endpoint_create_index(self) -> str:
        return "/indexes"

    def _get_endpoint_setting(self, index_uid: str, setting: str) -> str:
        if setting not in self._SETTING_PATHS:
            raise ValueError(f"Unknown index setting '{setting}' for Meilisearch.")
        return f"/indexes/{index_uid}/settings/{self._SETTING_PATHS[setting]}"

    def _get_endpoint_documents(self, index_uid: str) -> str:
        return f"/indexes/{index_uid}/documents"

    def _get_endpoint_fetch_documents(self, index_uid: str) -> str:
        return f"/indexes/{index_uid}/documents/fetch"

    def _get_endpoint_delete_documents(self, index_uid: str) -> str:
        return f"/indexes/{index_uid}/documents/delete-batch"

    def _get_endpoint_task(self, task_uid: int) -> str:
        return f"/tasks/{task_uid}"

    ##########################################
    ########### PAYLOAD BUILDER ##############
    ##########################################

    def get_create_index_payload(self, index_uid: str, primary_key: str) -> dict:
        return {"uid": index_uid, "primaryKey": primary_key}

    def get_fetch_payload(self, fields: list[str], limit: int, offset: int) -> dict:
        return {"fields": fields, "limit": limit, "offset": offset}

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def extract_health_status(self, raw_response: dict) -> str:
        return str(raw_response.get("status", "unknown"))

    def extract_index(self, raw_response: dict) -> IndexHandle:
        return IndexHandle(uid=raw_response["uid"], primary_key=raw_response.get("primaryKey") or "guid")

    def extract_fetch_content(self, raw_response: dict) -> tuple[list[dict], int]:
        results = raw_response.get("results", [])
        return results, int(raw_response.get("total", len(results)))
