from fastapi import APIRouter, Depends, Request

from server.dependencies.auth import verify_api_key
from server.models.responses import StatusResponse

router = APIRouter(prefix="/status", tags=["status"])


@router.get("")
async def get_status(
    request: Request,
    _: None = Depends(verify_api_key),
) -> StatusResponse:
    """Report the search engine connection status and the progress of the last indexing pass.

    Args:
        request (Request): FastAPI request (provides app.state.connection and app.state.pipeline).
        _ (None): Auth dependency result (unused).

    Returns:
        StatusResponse: Connection status string, connected flag and pipeline status map.
    """
    connection = request.app.state.connection
    pipeline = request.app.state.pipeline
    return StatusResponse(
        status=connection.status,
        connected=connection.is_connected,
        pipeline=pipeline.get_status(),
    )
