"""Client-side synchronization for paginated spreadsheet record services."""

__version__ = "0.1.0"
