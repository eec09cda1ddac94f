from pydantic import BaseModel, ConfigDict


class IndexHandle(BaseModel):
    """Resolved target index.

    Attributes:
        uid:         Index name on the engine.
        primary_key: Document attribute used as primary key.
    """

    model_config = ConfigDict(frozen=True)

    uid: str
    primary_key: str = "guid"
