"""Delete coordination with optimistic removal and reconciliation."""

import logging
from typing import Optional

from sheetsync.models.row import RecordId
from sheetsync.services.paged_store import PagedDataStore
from sheetsync.services.record_client import RecordPage, RemoteRecordClient

logger = logging.getLogger(__name__)


class DeletionCoordinator:
    """Delete a record remotely, then bring the window back in line."""

    def __init__(self, client: RemoteRecordClient, store: PagedDataStore):
        self.client = client
        self.store = store

    async def delete(self, record_id: RecordId) -> Optional[RecordPage]:
        """Delete *record_id* and reload the current page.

        The local window is only touched once the service has confirmed
        the delete. The offset is left alone even if the reloaded page
        comes back empty.
        """
        await self.client.delete_record(record_id)

        if not self.store.remove_local(record_id):
            logger.warning(f"Deleted record {record_id} was not on the loaded page")

        offset = self.store.window.offset
        logger.info(f"Reconciling page {offset} after deleting record {record_id}")
        return await self.store.load_page(offset)
