"""Thread, message and run types for assistantchat."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Thread(BaseModel):
    """Represents a conversation thread."""

    id: str
    created_at: Optional[datetime] = None
    metadata: Optional[Dict[str, Any]] = None


class Text(BaseModel):
    value: str
    annotations: List[Dict[str, Any]] = Field(default_factory=list)


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: Text


class ImageFile(BaseModel):
    file_id: str


class ImageFileContent(BaseModel):
    type: Literal["image_file"] = "image_file"
    image_file: ImageFile


class OtherContent(BaseModel):
    """Any content part this client does not render."""

    model_config = ConfigDict(extra="allow")

    type: str


MessageContent = Annotated[
    Union[TextContent, ImageFileContent, OtherContent],
    Field(union_mode="left_to_right"),
]


class Message(BaseModel):
    """Represents a message within a thread."""

    id: str
    thread_id: str
    role: str  # "user" or "assistant"
    content: List[MessageContent] = Field(default_factory=list)
    run_id: Optional[str] = None
    assistant_id: Optional[str] = None
    file_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    @property
    def text(self) -> str:
        """Concatenated value of every text part; other parts are skipped."""
        return "".join(
            part.text.value for part in self.content if isinstance(part, TextContent)
        )


class MessageListResponse(BaseModel):
    """Response containing messages from a thread."""

    data: List[Message]
    has_more: bool = False
    first_id: Optional[str] = None
    last_id: Optional[str] = None


class CreateMessageOptions(BaseModel):
    """Options for appending a message to a thread."""

    content: str
    role: str = "user"
    file_ids: Optional[List[str]] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(exclude_none=True)
        if not payload.get("file_ids"):
            payload.pop("file_ids", None)
        return payload


class RunStatus(str, Enum):
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"


# Anything the service reports outside these is treated as finished.
ACTIVE_STATUSES = frozenset(
    {RunStatus.QUEUED, RunStatus.IN_PROGRESS, RunStatus.REQUIRES_ACTION, RunStatus.CANCELLING}
)


class LastError(BaseModel):
    code: Optional[str] = None
    message: str


class Run(BaseModel):
    """Represents one run of an assistant against a thread."""

    id: str
    thread_id: str
    assistant_id: Optional[str] = None
    status: str
    last_error: Optional[LastError] = None
    created_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return self.status not in ACTIVE_STATUSES


class CreateRunOptions(BaseModel):
    """Options for starting a run."""

    assistant_id: str
    instructions: Optional[str] = None
