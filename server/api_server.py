"""FastAPI application entry point for the media index bridge."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import IndexerConfig
from services.media_index_sync.IndexingPipeline import IndexingPipeline
from services.media_index_sync.index_runner import build_connection
from services.media_index_sync.sources.ItemSourceManager import ItemSourceManager
from server.routers.StatusRouter import router as status_router
from server.routers.ConfigurationRouter import router as configuration_router
from server.routers.IndexRouter import router as index_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)

    connection = build_connection(app.state.helper_config)
    source = ItemSourceManager(helper_config=app.state.helper_config).get_source()
    app.state.connection = connection
    app.state.source = source
    app.state.pipeline = IndexingPipeline(
        helper_config=app.state.helper_config,
        item_source=source,
        connection=connection,
    )

    # a failed connect is reported via /status, the server stays up
    await connection.apply_configuration(IndexerConfig.from_env(app.state.helper_config))
    logging.info("Search engine status: %s", connection.status)

    # while the app is running...
    yield

    # when the app shuts down, release the session and the database handle
    logging.info("Shutting down, closing search session...")
    await connection.close()
    close_source = getattr(source, "close", None)
    if close_source is not None:
        close_source()
    logging.info("Search session closed.")


app = FastAPI(
    title="media_index_bridge",
    description=(
        "Keeps a Meilisearch index in sync with a media library database. "
        "GET /status reports connection and indexing progress, "
        "POST /configuration applies new engine settings and "
        "POST /index starts a full indexing pass."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.include_router(status_router)
app.include_router(configuration_router)
app.include_router(index_router)


if __name__ == "__main__":
    import uvicorn

    logging.info(
        "Starting media_index_bridge API Server v%s from root dir: %s on port 8000...",
        app_version,
        os.environ.get("ROOT_DIR", "unknown"),
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
