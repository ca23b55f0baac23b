"""Assistant types and models for assistantchat."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class Assistant(BaseModel):
    """Represents a remotely defined assistant."""

    id: str
    name: Optional[str] = None
    model: Optional[str] = None
    instructions: Optional[str] = None
    file_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class AssistantListResponse(BaseModel):
    """Response containing a page of assistants."""

    data: List[Assistant]
    has_more: bool = False
    first_id: Optional[str] = None
    last_id: Optional[str] = None
