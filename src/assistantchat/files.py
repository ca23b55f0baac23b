"""File types and models for assistantchat."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import AssistantChatError, PartialFetchError


class File(BaseModel):
    """Represents an uploaded file."""

    id: str
    filename: str
    purpose: Optional[str] = None
    bytes: Optional[int] = None
    created_at: Optional[datetime] = None


class FileListing(BaseModel):
    """Result of fetching the files attached to an assistant.

    ``files`` holds the successful lookups in request order and ``errors``
    maps every identifier that could not be fetched to the error raised for
    it. Callers decide whether a partial listing is good enough.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    files: List[File] = Field(default_factory=list)
    errors: Dict[str, AssistantChatError] = Field(default_factory=dict)

    @property
    def file_ids(self) -> List[str]:
        return [file.id for file in self.files]

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise PartialFetchError(dict(self.errors))
