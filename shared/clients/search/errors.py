"""Exceptions raised by the search engine clients and the connection manager."""


class SearchError(Exception):
    """Base class for all search engine errors."""


class SearchCommunicationError(SearchError):
    """The engine could not be reached (connect failure, reset, timeout)."""


class SearchApiError(SearchError):
    """The engine answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code of the response.
        code: Engine-specific error code (e.g. "invalid_api_key"), if any.
    """

    def __init__(self, message: str, status_code: int, code: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class SearchUnavailableError(SearchError):
    """No live session; a background reconnect has been scheduled."""


class SearchTaskFailedError(SearchError):
    """An enqueued engine task finished with status "failed"."""

    def __init__(self, message: str, task_uid: int) -> None:
        super().__init__(message)
        self.task_uid = task_uid
