"""Exception hierarchy for assistantchat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .threads import Run


class AssistantChatError(Exception):
    """Base error for everything raised by assistantchat."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(AssistantChatError):
    """Raised when required configuration (the API key) is missing or invalid."""


class RemoteServiceError(AssistantChatError):
    """Raised when a call to the assistant service fails."""


class UserInputError(AssistantChatError):
    """Raised when typed input does not name anything known."""


class PartialFetchError(AssistantChatError):
    """Raised when some of a batch of file lookups failed."""

    def __init__(self, errors: Dict[str, AssistantChatError]) -> None:
        ids = ", ".join(errors)
        super().__init__(f"Could not fetch {len(errors)} file(s): {ids}")
        self.errors = errors


class RunNotCompletedError(AssistantChatError):
    """Raised when a run reaches a terminal status other than ``completed``."""

    def __init__(self, run: "Run", message: Optional[str] = None) -> None:
        super().__init__(message or f"Run did not complete successfully. Status: {run.status}")
        self.run = run


class RunFailedError(RunNotCompletedError):
    def __init__(self, run: "Run") -> None:
        detail = run.last_error.message if run.last_error else "unknown error"
        super().__init__(run, f"Run failed: {detail}")


class RunCancelledError(RunNotCompletedError):
    def __init__(self, run: "Run") -> None:
        super().__init__(run, "Run was cancelled.")


class RunExpiredError(RunNotCompletedError):
    def __init__(self, run: "Run") -> None:
        super().__init__(run, "Run expired before completing.")


class RunTimeoutError(AssistantChatError):
    """Raised when a poller gives up after its configured number of attempts."""
