"""View state shared by the client services."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from sheetsync.models.upload import UploadFile
from sheetsync.models.window import PageWindow


class SearchState(BaseModel):
    """The identifier search currently applied to the loaded window."""

    term: str = ""
    active: bool = False


class Notice(BaseModel):
    """A message for the user, produced at the point an intent finished or failed."""

    level: Literal["info", "warning", "error"]
    message: str


class ViewState(BaseModel):
    """Everything the rendering layer observes.

    One instance is created by the view controller and handed by
    reference to each service that mutates it.
    """

    window: PageWindow = Field(default_factory=PageWindow)
    search: SearchState = Field(default_factory=SearchState)
    selected_file: Optional[UploadFile] = None
    ready: bool = False  # A record set has been uploaded and may be paged
    notices: List[Notice] = Field(default_factory=list)
