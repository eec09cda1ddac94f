from pydantic import BaseModel, ConfigDict

from shared.clients.search.SearchClientInterface import SearchClientInterface
from shared.clients.search.models.IndexHandle import IndexHandle


class SearchSession(BaseModel):
    """A live client together with its target index.

    Replaced as a whole on every (re)connect so readers never observe a
    client from one session paired with the index of another.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    client: SearchClientInterface
    index: IndexHandle
