"""Upload file model."""

import mimetypes
from pathlib import Path
from typing import Union

from pydantic import BaseModel


class UploadFile(BaseModel):
    """A spreadsheet file chosen for upload."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "UploadFile":
        """Read a file from disk."""
        path = Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        )
