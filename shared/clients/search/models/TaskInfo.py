from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TaskInfo(BaseModel):
    """Summary of an asynchronous engine task.

    Write operations (document upserts, settings updates, deletions) are only
    enqueued by the engine; the returned task can be polled until it reaches
    "succeeded" or "failed".

    Attributes:
        task_uid:   Engine-assigned task identifier.
        index_uid:  Index the task operates on.
        status:     "enqueued", "processing", "succeeded", "failed" or "canceled".
        type:       Task type, e.g. "documentAdditionOrUpdate".
        error:      Error object for failed tasks.
    """

    model_config = ConfigDict(extra="ignore")

    task_uid: int = Field(validation_alias=AliasChoices("taskUid", "uid", "task_uid"))
    index_uid: str | None = Field(default=None, validation_alias=AliasChoices("indexUid", "index_uid"))
    status: str = "enqueued"
    type: str | None = None
    error: dict | None = None

    def is_finished(self) -> bool:
        return self.status in ("succeeded", "failed", "canceled")
