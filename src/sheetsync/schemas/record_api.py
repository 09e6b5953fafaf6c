"""Schemas for record service payloads."""

from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from sheetsync.models.row import RecordId


class RecordSchema(BaseModel):
    """One stored record as returned by ``GET /data``.

    ``rowData`` is the JSON-encoded column mapping; it is decoded later
    so that one bad record does not fail the whole page.
    """

    id: RecordId
    rowData: Any = None


class RecordPageSchema(BaseModel):
    """Response schema for ``GET /data``."""

    content: List[RecordSchema] = []
    totalElements: int = Field(default=0, ge=0)

    @field_validator("totalElements", mode="before")
    @classmethod
    def missing_total_is_zero(cls, value: Any) -> Any:
        return 0 if value is None else value
