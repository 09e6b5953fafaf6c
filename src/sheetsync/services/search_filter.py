"""Identifier search over the loaded page window."""

import logging
from typing import List

from sheetsync.models.row import Row
from sheetsync.models.window import PageWindow

logger = logging.getLogger(__name__)


class SearchFilter:
    """Case-insensitive substring match on one identifier column.

    Only rows already in the window are searched; nothing is fetched.
    """

    def __init__(self, column: str = "ID") -> None:
        self.column = column

    def apply(self, term: str, window: PageWindow) -> List[Row]:
        """Return the rows of *window* whose identifier contains *term*.

        A blank term returns every row of the window.
        """
        needle = term.strip().lower()
        if not needle:
            return list(window.rows)

        matches = [
            row
            for row in window.rows
            if needle in (row.get(self.column) or "").lower()
        ]
        if not matches:
            logger.warning(f"No rows on page {window.offset} match {self.column}~{term.strip()!r}")
        return matches
