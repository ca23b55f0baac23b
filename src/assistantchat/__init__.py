"""Terminal chat client for hosted assistants."""

from importlib.metadata import version

from .assistants import Assistant, AssistantListResponse
from .async_client import AsyncAssistantsClient
from .console import Console
from .conversation import Conversation, ConversationState, Outcome
from .exceptions import (
    AssistantChatError,
    ConfigurationError,
    PartialFetchError,
    RemoteServiceError,
    RunCancelledError,
    RunExpiredError,
    RunFailedError,
    RunNotCompletedError,
    RunTimeoutError,
    UserInputError,
)
from .files import File, FileListing
from .polling import RunPoller
from .session import Session, SessionContext
from .sync_client import AssistantsClient
from .threads import (
    CreateMessageOptions,
    CreateRunOptions,
    Message,
    MessageListResponse,
    Run,
    RunStatus,
    Thread,
)

__version__ = version("assistantchat")

__all__ = [
    "AssistantsClient",
    "AsyncAssistantsClient",
    "AssistantChatError",
    "ConfigurationError",
    "RemoteServiceError",
    "UserInputError",
    "PartialFetchError",
    "RunNotCompletedError",
    "RunFailedError",
    "RunCancelledError",
    "RunExpiredError",
    "RunTimeoutError",
    # Assistant types
    "Assistant",
    "AssistantListResponse",
    # Thread types
    "Thread",
    "Message",
    "MessageListResponse",
    "CreateMessageOptions",
    "CreateRunOptions",
    "Run",
    "RunStatus",
    "RunPoller",
    # File types
    "File",
    "FileListing",
    # Interactive pieces
    "Console",
    "Conversation",
    "ConversationState",
    "Outcome",
    "Session",
    "SessionContext",
    "__version__",
]
