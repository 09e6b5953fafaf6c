"""Row model for records materialized from the record service."""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

RecordId = Union[int, str]


class Row(BaseModel):
    """One spreadsheet record as shown in the table.

    ``cells`` keeps the column order of the decoded payload and holds
    every value as a string. ``record_id`` addresses the record on the
    service and is never part of the displayed cells.
    """

    record_id: RecordId
    cells: Dict[str, str] = Field(default_factory=dict)

    @property
    def columns(self) -> List[str]:
        """Display columns in payload order."""
        return list(self.cells)

    def get(self, column: str) -> Optional[str]:
        """Return the cell for *column*, or None when the row has no such column."""
        return self.cells.get(column)
