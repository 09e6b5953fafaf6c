"""Page window model."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from sheetsync.models.row import RecordId, Row


def page_count(total_count: int, size: int) -> int:
    """Number of pages needed to show *total_count* records, *size* per page."""
    if total_count <= 0:
        return 0
    return -(-total_count // size)


class PageWindow(BaseModel):
    """The currently loaded page plus the record count seen with it.

    ``total_count`` is only authoritative right after a fetch; local
    mutations make it provisional until the next load.
    """

    offset: int = Field(default=0, ge=0)
    size: int = Field(default=10, gt=0)
    rows: List[Row] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)

    model_config = ConfigDict(validate_assignment=True)

    @property
    def total_pages(self) -> int:
        return page_count(self.total_count, self.size)

    def record_ids(self) -> List[RecordId]:
        return [row.record_id for row in self.rows]
