"""Tests for delete coordination."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from sheetsync.core.config import Settings
from sheetsync.core.errors import TransportError
from sheetsync.models.view_state import ViewState
from sheetsync.services.deletion import DeletionCoordinator
from sheetsync.services.paged_store import PagedDataStore
from sheetsync.services.record_client import RecordPage

from tests.conftest import make_row


@pytest.fixture
def client():
    """Create a mock record client."""
    client = MagicMock()
    client.delete_record = AsyncMock()
    client.fetch_page = AsyncMock()
    return client


@pytest.fixture
def state():
    """Create an empty view state."""
    return ViewState()


@pytest.fixture
def coordinator(client, state):
    """Create a coordinator over a window showing records 1 and 2 of 2."""
    store = PagedDataStore(client, state, Settings(backend_url="http://testserver", page_size=10))
    state.window.rows = [make_row(1, ID="A"), make_row(2, ID="B")]
    state.window.total_count = 2
    return DeletionCoordinator(client, store)


@pytest.mark.asyncio
async def test_delete_removes_then_reconciles(coordinator, client, state):
    """Test the optimistic removal followed by an authoritative reload."""
    seen = {}

    async def fetch(offset, size):
        seen["rows"] = state.window.record_ids()
        seen["count"] = state.window.total_count
        return RecordPage(rows=[make_row(1, ID="A")], total_count=1)

    client.fetch_page.side_effect = fetch

    page = await coordinator.delete(2)

    client.delete_record.assert_awaited_once_with(2)
    client.fetch_page.assert_awaited_once_with(0, 10)
    assert seen == {"rows": [1], "count": 1}
    assert page.total_count == 1
    assert state.window.record_ids() == [1]
    assert state.window.total_count == 1


@pytest.mark.asyncio
async def test_reconciliation_overrides_optimistic_count(coordinator, client, state):
    """Test that the server's count replaces the optimistic one."""
    client.fetch_page.return_value = RecordPage(
        rows=[make_row(1, ID="A"), make_row(7, ID="G")], total_count=5
    )

    await coordinator.delete(2)

    assert state.window.record_ids() == [1, 7]
    assert state.window.total_count == 5


@pytest.mark.asyncio
async def test_failed_delete_leaves_window_unchanged(coordinator, client, state):
    """Test that a rejected delete commits nothing locally."""
    client.delete_record.side_effect = TransportError("Record locked", 409, "delete")

    with pytest.raises(TransportError, match="Record locked"):
        await coordinator.delete(2)

    client.fetch_page.assert_not_awaited()
    assert state.window.record_ids() == [1, 2]
    assert state.window.total_count == 2


@pytest.mark.asyncio
async def test_failed_reconciliation_keeps_optimistic_state(coordinator, client, state):
    """Test that the confirmed delete stays applied when the reload fails."""
    client.fetch_page.side_effect = TransportError("Timeout", 504, "fetch")

    with pytest.raises(TransportError):
        await coordinator.delete(1)

    assert state.window.record_ids() == [2]
    assert state.window.total_count == 1


@pytest.mark.asyncio
async def test_delete_does_not_move_offset(coordinator, client, state):
    """Test that an emptied page beyond the first keeps its offset."""
    state.window.offset = 1
    client.fetch_page.return_value = RecordPage(rows=[], total_count=10)

    await coordinator.delete(2)

    client.fetch_page.assert_awaited_once_with(1, 10)
    assert state.window.offset == 1
    assert state.window.rows == []
