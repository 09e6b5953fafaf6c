"""Transport wrapper for the spreadsheet record service."""

import json
import logging
import math
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from sheetsync.core.config import Settings
from sheetsync.core.errors import DecodeError, TransportError
from sheetsync.models.row import RecordId, Row
from sheetsync.models.upload import UploadFile
from sheetsync.schemas.record_api import RecordPageSchema, RecordSchema

logger = logging.getLogger(__name__)


class RecordPage(BaseModel):
    """One decoded page of records."""

    rows: List[Row] = Field(default_factory=list)
    total_count: int = 0
    decode_errors: List[DecodeError] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)


def stringify_cell(value: Any) -> str:
    """Render a decoded cell value the way the table displays it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def decode_row(record: RecordSchema) -> Row:
    """Decode a record's ``rowData`` and merge in its identifier.

    Raises
    ------
    DecodeError
        If ``rowData`` is not a JSON-encoded object.
    """
    if not isinstance(record.rowData, str):
        raise DecodeError(
            f"Record {record.id} has no encoded row data", record_id=record.id
        )
    try:
        decoded = json.loads(record.rowData)
    except json.JSONDecodeError as e:
        raise DecodeError(
            f"Record {record.id} has malformed row data: {e.msg}", record_id=record.id
        ) from e
    if not isinstance(decoded, dict):
        raise DecodeError(
            f"Record {record.id} row data is not a column mapping", record_id=record.id
        )

    cells: Dict[str, str] = {str(key): stringify_cell(value) for key, value in decoded.items()}
    return Row(record_id=record.id, cells=cells)


class RemoteRecordClient:
    """Issue upload, page and delete requests against the record service.

    Every failed request raises :class:`TransportError` with the
    service's response text as its message.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            base_url=settings.backend_url,
            verify=settings.verify_ssl,
            timeout=settings.timeout,
        )

    async def __aenter__(self) -> "RemoteRecordClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def _send(self, operation: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.http_client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"{operation} request to {url} failed: {e}")
            raise TransportError(str(e) or type(e).__name__, operation=operation) from e

        if not response.is_success:
            logger.error(
                f"{operation} request to {url} returned {response.status_code}: {response.text}"
            )
            raise TransportError(
                response.text, status_code=response.status_code, operation=operation
            )
        return response

    async def upload(self, file: UploadFile) -> None:
        """Submit a spreadsheet as the multipart field ``file``."""
        logger.info(f"Uploading {file.filename} ({len(file.content)} bytes)")
        await self._send(
            "upload",
            "POST",
            "/upload",
            files={"file": (file.filename, file.content, file.content_type)},
        )
        logger.info(f"Upload of {file.filename} accepted")

    async def fetch_page(self, offset: int, size: int) -> RecordPage:
        """Fetch one page of records.

        Records whose row data cannot be decoded, or that repeat an
        identifier already on the page, are left out of ``rows`` and
        reported in ``decode_errors``.
        """
        response = await self._send(
            "fetch", "GET", "/data", params={"page": offset, "size": size}
        )
        try:
            payload = RecordPageSchema.model_validate(response.json())
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.error(f"Malformed page payload for page {offset}: {e}")
            raise DecodeError(f"Malformed page payload: {e}") from e

        page = RecordPage(total_count=payload.totalElements)
        seen = set()
        for record in payload.content:
            if record.id in seen:
                page.decode_errors.append(
                    DecodeError(f"Record {record.id} appears twice on the page", record_id=record.id)
                )
                continue
            try:
                page.rows.append(decode_row(record))
            except DecodeError as e:
                logger.warning(e.message)
                page.decode_errors.append(e)
                continue
            seen.add(record.id)

        logger.info(
            f"Fetched page {offset}: {len(page.rows)} rows of {page.total_count} records"
        )
        return page

    async def delete_record(self, record_id: RecordId) -> None:
        """Delete one record by its service identifier."""
        logger.info(f"Deleting record {record_id}")
        await self._send("delete", "DELETE", "/delete", params={"id": record_id})
        logger.info(f"Deleted record {record_id}")
