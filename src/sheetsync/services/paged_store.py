"""Paged data store holding the loaded page window."""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from sheetsync.core.config import Settings
from sheetsync.core.errors import DecodeError
from sheetsync.models.row import RecordId
from sheetsync.models.view_state import ViewState
from sheetsync.models.window import PageWindow
from sheetsync.services.record_client import RecordPage, RemoteRecordClient

logger = logging.getLogger(__name__)


class PagedDataStore:
    """Single source of truth for which page is shown.

    The store never moves ``offset`` itself; navigation sets it before
    asking for a load.
    """

    def __init__(self, client: RemoteRecordClient, state: ViewState, settings: Settings):
        self.client = client
        self.state = state
        self.sequencing = settings.request_sequencing
        self.state.window = PageWindow(size=settings.page_size)
        self._issued = 0
        self._applied = 0

    @property
    def window(self) -> PageWindow:
        return self.state.window

    async def load_page(self, offset: int) -> Optional[RecordPage]:
        """Fetch the page at *offset* and replace the window's rows and count.

        Returns the fetched page, or None when sequencing is on and a
        newer load or a local mutation has overtaken this request. On
        failure the window is left as it was and the error propagates.
        """
        self._issued += 1
        sequence = self._issued

        page = await self.client.fetch_page(offset, self.window.size)

        if self.sequencing and sequence < self._applied:
            logger.warning(
                f"Discarding stale page {offset} response (request {sequence}, "
                f"already applied {self._applied})"
            )
            return None

        try:
            loaded = PageWindow(
                offset=self.window.offset,
                size=self.window.size,
                rows=page.rows,
                total_count=page.total_count,
            )
        except PydanticValidationError as e:
            logger.error(f"Page {offset} response does not fit the window: {e}")
            raise DecodeError(f"Malformed page payload: {e}") from e

        self._applied = sequence
        self.window.rows = loaded.rows
        self.window.total_count = loaded.total_count
        logger.info(
            f"Loaded page {offset}: {len(page.rows)} rows, {page.total_count} records total"
        )
        return page

    def remove_local(self, record_id: RecordId) -> bool:
        """Drop a row ahead of reconciliation and decrement the count.

        Loads still in flight were issued before this change and are
        treated as stale.
        """
        rows = [row for row in self.window.rows if row.record_id != record_id]
        removed = len(rows) != len(self.window.rows)
        self.window.rows = rows
        self.window.total_count = max(self.window.total_count - 1, 0)
        self._applied = self._issued + 1
        self._issued = self._applied
        return removed
