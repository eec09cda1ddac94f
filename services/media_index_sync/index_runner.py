"""Index runner entry point.

Connects to the search engine, applies the index schema and runs one full
indexing pass from the configured item source.

Usage:
    python -m services.media_index_sync.index_runner
"""

import asyncio
import sys

from services.media_index_sync.IndexingPipeline import IndexingPipeline
from services.media_index_sync.sources.ItemSourceManager import ItemSourceManager
from shared.clients.search.IndexSchemaInitializer import IndexSchemaInitializer
from shared.clients.search.SearchClientManager import SearchClientManager
from shared.clients.search.SearchConnectionManager import SearchConnectionManager
from shared.helper.HelperConfig import HelperConfig
from shared.logging.logging_setup import setup_logging
from shared.models.config import IndexerConfig


def build_connection(config: HelperConfig) -> SearchConnectionManager:
    """Wire the connection manager from env settings (shared with the API server)."""
    call_timeout = float(config.get_number_val("SEARCH_CALL_TIMEOUT", default=60))
    return SearchConnectionManager(
        helper_config=config,
        client_manager=SearchClientManager(helper_config=config),
        schema_initializer=IndexSchemaInitializer(
            helper_config=config,
            application_name=config.get_string_val("APP_NAME", default="Jellyfin"),
        ),
        call_timeout=call_timeout if call_timeout > 0 else None,
    )


async def main() -> int:
    """Run one full indexing pass. Returns the process exit code."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)
    connection = build_connection(config)
    source = ItemSourceManager(helper_config=config).get_source()

    try:
        await connection.apply_configuration(IndexerConfig.from_env(config))
        if not connection.is_connected:
            logger.error("Search engine not available (%s). Aborting.", connection.status)
            return 1

        pipeline = IndexingPipeline(helper_config=config, item_source=source, connection=connection)
        if not await pipeline.run():
            logger.error("Indexing pass failed: %s", pipeline.get_status().get("Error", "unknown error"))
            return 1
        logger.info("Indexing pass finished: %s", pipeline.get_status(), color="green")
        return 0
    finally:
        await connection.close()
        close_source = getattr(source, "close", None)
        if close_source is not None:
            close_source()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
