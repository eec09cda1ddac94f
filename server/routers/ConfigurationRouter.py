from fastapi import APIRouter, Depends, Request

from server.dependencies.auth import verify_api_key
from server.models.requests import ConfigurationRequest
from server.models.responses import ConfigurationResponse

router = APIRouter(prefix="/configuration", tags=["configuration"])


@router.post("")
async def apply_configuration(
    request: Request,
    body: ConfigurationRequest,
    _: None = Depends(verify_api_key),
) -> ConfigurationResponse:
    """Apply a new search engine configuration and reconnect with it.

    A failed connect is not an HTTP error; the outcome is reported in the status field.

    Args:
        request (Request): FastAPI request (provides app.state.connection).
        body (ConfigurationRequest): The new configuration.
        _ (None): Auth dependency result (unused).

    Returns:
        ConfigurationResponse: Connection status after applying the configuration.
    """
    connection = request.app.state.connection
    await connection.apply_configuration(body.to_indexer_config())
    return ConfigurationResponse(status=connection.status, connected=connection.is_connected)
