"""Indexing pipeline.

Reads every item from the configured ItemSource, maps the items to search
documents and upserts them into the search index through the connection
manager. Every pass is a full resync; documents of items that disappeared
from the source are removed afterwards.
"""

import time
from datetime import datetime, timezone

from services.media_index_sync.DocumentMapper import map_items
from services.media_index_sync.sources.ItemSourceInterface import ItemSourceInterface
from shared.clients.search.SearchConnectionManager import SearchConnectionManager
from shared.clients.search.models.SearchDocument import SearchDocument
from shared.helper.HelperConfig import HelperConfig

UPSERT_BATCH_SIZE = 1000  # max documents per upsert call
DELETE_BATCH_SIZE = 1000  # max ids per delete call


class IndexingPipeline:
    """Orchestrates one complete pull-map-submit pass."""

    def __init__(
        self,
        helper_config: HelperConfig,
        item_source: ItemSourceInterface,
        connection: SearchConnectionManager,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._item_source = item_source
        self._connection = connection
        self._batch_size = max(1, int(helper_config.get_number_val("INDEX_BATCH_SIZE", default=UPSERT_BATCH_SIZE)))
        self._cleanup_orphans_enabled = helper_config.get_bool_val("INDEX_CLEANUP_ORPHANS", default=True)
        self._wait_for_tasks = helper_config.get_bool_val("INDEX_WAIT_FOR_TASKS", default=False)
        self._task_timeout = float(helper_config.get_number_val("INDEX_TASK_TIMEOUT", default=300))

        self._status: dict[str, str] = {"State": "idle"}
        self._running = False

    ##########################################
    ################ STATUS ##################
    ##########################################

    def get_status(self) -> dict[str, str]:
        """Snapshot of the progress map (State, Database, Items, Documents, Submitted, ...)."""
        return dict(self._status)

    def is_running(self) -> bool:
        return self._running

    def _publish(self, **entries: object) -> None:
        # swap in a new map so readers never see a half-updated one
        self._status = {**self._status, **{key: str(value) for key, value in entries.items()}}

    ##########################################
    ############### CORE PASS ################
    ##########################################

    async def run(self) -> bool:
        """Run one full indexing pass.

        Returns:
            bool: True if all documents were submitted, False if the pass failed or another
                pass was already running. Batches submitted before a failure stay in the index.
        """
        if self._running:
            self.logging.warning("Indexing pass requested while another pass is running. Ignoring.")
            return False

        self._running = True
        started = time.monotonic()
        self._status = {"State": "running", "LastRun": datetime.now(timezone.utc).isoformat()}
        self.logging.info("Starting indexing pass...")
        try:
            source_status: dict[str, str] = {}
            items = await self._item_source.produce_items(source_status)
            self._publish(**source_status, Items=len(items))

            documents, skipped = map_items(items, self.logging)
            self._publish(Documents=len(documents), Skipped=skipped)

            if not documents:
                self.logging.warning("Item source returned no documents. Nothing to index.")
            else:
                await self._submit(documents)
                if self._cleanup_orphans_enabled:
                    await self._cleanup_orphans({document.guid for document in documents})
        except Exception as exc:
            self.logging.error("Indexing pass failed: %s", exc)
            self._publish(State="failed", Error=str(exc) or exc.__class__.__name__)
            return False
        finally:
            self._running = False

        duration = time.monotonic() - started
        self._publish(State="completed", Duration=f"{duration:.1f}s")
        self.logging.info(
            "Indexing pass complete: %s documents submitted, %s skipped in %.1fs.",
            self._status.get("Submitted", "0"), self._status.get("Skipped", "0"), duration,
        )
        return True

    ##########################################
    ############### SUBMISSION ###############
    ##########################################

    async def _submit(self, documents: list[SearchDocument]) -> None:
        """Upsert documents in batches to avoid oversized requests.

        Raises:
            Exception: The first batch error that survived the connection manager's retry.
        """
        submitted = 0
        total_batches = (len(documents) + self._batch_size - 1) // self._batch_size
        self._publish(Submitted=0, Batches=f"0/{total_batches}")

        for batch_number, batch_start in enumerate(range(0, len(documents), self._batch_size), start=1):
            payload = [document.to_payload() for document in documents[batch_start: batch_start + self._batch_size]]
            task = await self._connection.execute(
                lambda client, index: client.do_add_documents(index, payload)
            )
            if self._wait_for_tasks:
                await self._connection.execute(
                    lambda client, index: client.do_wait_for_task(task.task_uid, timeout=self._task_timeout)
                )
            submitted += len(payload)
            self._publish(Submitted=submitted, Batches=f"{batch_number}/{total_batches}")
            self.logging.debug("Submitted batch %d/%d (task %d).", batch_number, total_batches, task.task_uid)

    ##########################################
    ############ ORPHAN CLEANUP ##############
    ##########################################

    async def _cleanup_orphans(self, current_ids: set[str]) -> None:
        """Remove documents whose item no longer exists in the source.

        A failed cleanup is logged and leaves the pass successful; the next pass tries again.

        Args:
            current_ids (set[str]): guids of every document produced in this pass.
        """
        try:
            indexed_ids = await self._connection.execute(
                lambda client, index: client.do_fetch_document_ids(index)
            )
        except Exception as exc:
            self.logging.error("Orphan cleanup: listing indexed documents failed: %s. Skipping cleanup.", exc)
            self._publish(Removed="skipped")
            return

        orphan_ids = sorted(indexed_ids - current_ids)
        if not orphan_ids:
            self.logging.info("Orphan cleanup: no stale documents found.")
            self._publish(Removed=0)
            return

        self.logging.info("Orphan cleanup: removing %d stale document(s).", len(orphan_ids))
        removed = 0
        for batch_start in range(0, len(orphan_ids), DELETE_BATCH_SIZE):
            batch = orphan_ids[batch_start: batch_start + DELETE_BATCH_SIZE]
            try:
                await self._connection.execute(
                    lambda client, index: client.do_delete_documents(index, batch)
                )
                removed += len(batch)
            except Exception as exc:
                self.logging.error("Orphan cleanup: deleting %d document(s) failed: %s", len(batch), exc)
        self._publish(Removed=removed)
