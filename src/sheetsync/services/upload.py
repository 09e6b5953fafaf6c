"""Upload controller."""

import logging
from typing import Optional

from sheetsync.core.errors import ValidationError
from sheetsync.models.view_state import SearchState, ViewState
from sheetsync.services.paged_store import PagedDataStore
from sheetsync.services.record_client import RecordPage, RemoteRecordClient

logger = logging.getLogger(__name__)

NO_FILE_MESSAGE = "Please choose a file!"


class UploadController:
    """Submit the selected file and start paging the new record set."""

    def __init__(self, client: RemoteRecordClient, store: PagedDataStore, state: ViewState):
        self.client = client
        self.store = store
        self.state = state

    async def upload(self) -> Optional[RecordPage]:
        """Upload ``state.selected_file`` and load the first page.

        Raises
        ------
        ValidationError
            If no file has been selected.
        TransportError
            If the service rejects the file (state untouched) or the
            first page cannot be fetched.
        """
        file = self.state.selected_file
        if file is None:
            raise ValidationError(NO_FILE_MESSAGE)

        await self.client.upload(file)

        self.state.ready = True
        self.state.window.offset = 0
        self.state.search = SearchState()
        logger.info(f"Record set from {file.filename} is ready, loading first page")

        return await self.store.load_page(0)
