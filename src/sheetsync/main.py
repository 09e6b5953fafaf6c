"""View controller wiring the record client services together."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from sheetsync.core.config import Settings, get_settings
from sheetsync.core.errors import (
    DecodeError,
    EmptyResult,
    SheetSyncError,
    TransportError,
    ValidationError,
)
from sheetsync.models.row import RecordId, Row
from sheetsync.models.upload import UploadFile
from sheetsync.models.view_state import Notice, SearchState, ViewState
from sheetsync.models.window import page_count
from sheetsync.services.deletion import DeletionCoordinator
from sheetsync.services.paged_store import PagedDataStore
from sheetsync.services.record_client import RecordPage, RemoteRecordClient
from sheetsync.services.search_filter import SearchFilter
from sheetsync.services.upload import UploadController

logger = logging.getLogger(__name__)

UPLOAD_SAVED_MESSAGE = "File uploaded and saved successfully."
NO_MATCH_MESSAGE = "No record found."

# Prefix for transport failures, by the request that failed
_TRANSPORT_PREFIXES = {
    "upload": "Upload failed",
    "fetch": "Error fetching data",
    "delete": "Error deleting record",
}


class ViewController:
    """Route user intents to the services and expose what the table shows.

    Every intent method reports failures as notices on ``state`` rather
    than raising, so a rendering layer only has to read ``state`` and
    the derived properties after each call.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[RemoteRecordClient] = None,
    ) -> None:
        self.settings = settings
        self.client = client or RemoteRecordClient(settings)
        self.state = ViewState()
        self.store = PagedDataStore(self.client, self.state, settings)
        self.search_filter = SearchFilter(settings.search_column)
        self.deletions = DeletionCoordinator(self.client, self.store)
        self.uploads = UploadController(self.client, self.store, self.state)

    async def aclose(self) -> None:
        await self.client.aclose()

    # Derived values

    @property
    def offset(self) -> int:
        return self.state.window.offset

    @property
    def display_rows(self) -> List[Row]:
        """Rows to render: the loaded window, filtered while a search is active."""
        if self.state.search.active:
            return self.search_filter.apply(self.state.search.term, self.state.window)
        return list(self.state.window.rows)

    @property
    def total_count(self) -> int:
        """Count shown to the user; the filtered size while a search is active."""
        if self.state.search.active:
            return len(self.display_rows)
        return self.state.window.total_count

    @property
    def total_pages(self) -> int:
        return page_count(self.total_count, self.state.window.size)

    @property
    def current_page(self) -> int:
        return self.offset + 1

    @property
    def show_pagination(self) -> bool:
        return self.total_pages > 1

    @property
    def columns(self) -> List[str]:
        rows = self.display_rows
        return rows[0].columns if rows else []

    def drain_notices(self) -> List[Notice]:
        """Return pending notices and clear them."""
        notices = self.state.notices
        self.state.notices = []
        return notices

    # Intents

    def select_file(self, file: Union[str, Path, UploadFile, None]) -> None:
        if file is None or isinstance(file, UploadFile):
            self.state.selected_file = file
        else:
            self.state.selected_file = UploadFile.from_path(file)

    async def upload(self) -> None:
        try:
            page = await self.uploads.upload()
        except SheetSyncError as e:
            if _upload_was_stored(e):
                # Only the first page failed.
                self._notify("info", UPLOAD_SAVED_MESSAGE)
            self._report(e)
            return
        self._notify("info", UPLOAD_SAVED_MESSAGE)
        if page is not None:
            self._report_decode_errors(page)

    async def view_data(self) -> None:
        """Show the first page of whatever the service currently holds."""
        self.state.search = SearchState()
        self.state.window.offset = 0
        if await self._load(0):
            self.state.ready = True

    async def search(self, term: str) -> None:
        if not term.strip():
            self.state.search = SearchState(term=term)
            await self._load(self.offset)
            return

        self.state.search = SearchState(term=term, active=True)
        if not self.display_rows:
            self._report(EmptyResult(NO_MATCH_MESSAGE))

    async def next_page(self) -> None:
        await self.go_to(self.offset + 1)

    async def prev_page(self) -> None:
        await self.go_to(self.offset - 1)

    async def go_to(self, offset: int) -> None:
        """Move to *offset*, clamped into the available pages, and load it.

        Does nothing while a search is active.
        """
        if self.state.search.active:
            logger.info("Ignoring page navigation while a search is active")
            return
        last = max(self.total_pages - 1, 0)
        offset = min(max(offset, 0), last)
        if offset == self.offset:
            return
        self.state.window.offset = offset
        if self.state.ready:
            await self._load(offset)

    async def delete(self, record_id: RecordId) -> None:
        try:
            page = await self.deletions.delete(record_id)
        except SheetSyncError as e:
            self._report(e)
            return
        if page is not None:
            self._report_decode_errors(page)

        window = self.state.window
        if not window.rows and window.offset > 0:
            last = max(window.total_pages - 1, 0)
            if last < window.offset:
                logger.info(f"Page {window.offset} is empty after delete, moving to page {last}")
                window.offset = last
                await self._load(last)

    # Internals

    async def _load(self, offset: int) -> bool:
        try:
            page = await self.store.load_page(offset)
        except SheetSyncError as e:
            self._report(e)
            return False
        if page is not None:
            self._report_decode_errors(page)
        return True

    def _report_decode_errors(self, page: RecordPage) -> None:
        for error in page.decode_errors:
            self._report(error)

    def _report(self, error: SheetSyncError) -> None:
        if isinstance(error, TransportError):
            prefix = _TRANSPORT_PREFIXES.get(error.operation, "Request failed")
            logger.error(f"{prefix}: {error.message}")
            self._notify("error", f"{prefix}: {error.message}")
        elif isinstance(error, EmptyResult):
            self._notify("warning", error.message)
        elif isinstance(error, (ValidationError, DecodeError)):
            logger.warning(error.message)
            self._notify("error", error.message)
        else:
            logger.error(error.message)
            self._notify("error", error.message)

    def _notify(self, level: str, message: str) -> None:
        self.state.notices.append(Notice(level=level, message=message))


def _upload_was_stored(error: SheetSyncError) -> bool:
    """Whether *error* was raised after the service had accepted the file."""
    if isinstance(error, ValidationError):
        return False
    if isinstance(error, TransportError) and error.operation == "upload":
        return False
    return True


def create_controller(settings: Optional[Settings] = None) -> ViewController:
    """Build a view controller from the environment settings."""
    settings = settings or get_settings()
    logger.info("Creating view controller")
    return ViewController(settings)
