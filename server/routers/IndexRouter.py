from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from server.dependencies.auth import verify_api_key
from server.models.responses import IndexResponse

router = APIRouter(prefix="/index", tags=["index"])


@router.post("", status_code=202)
async def start_indexing(
    request: Request,
    background_tasks: BackgroundTasks,
    _: None = Depends(verify_api_key),
) -> IndexResponse:
    """Start a full indexing pass in the background.

    Args:
        request (Request): FastAPI request (provides app.state.pipeline).
        background_tasks (BackgroundTasks): FastAPI background task queue.
        _ (None): Auth dependency result (unused).

    Returns:
        IndexResponse: Acknowledgement; progress is reported by GET /status.

    Raises:
        HTTPException: 409 if a pass is already running.
    """
    pipeline = request.app.state.pipeline
    if pipeline.is_running():
        raise HTTPException(status_code=409, detail="An indexing pass is already running")
    background_tasks.add_task(pipeline.run)
    return IndexResponse(status="accepted")
