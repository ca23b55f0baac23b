"""Looking up assistants and the files attached to them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, List, Sequence, Union

from .assistants import Assistant
from .exceptions import UserInputError
from .files import FileListing

if TYPE_CHECKING:
    from .async_client import AsyncAssistantsClient
    from .console import Console

SELECT_PROMPT = "Which assistant would you like to use? Please enter the name: "
NOT_FOUND_MESSAGE = "Assistant not found. Please try again."

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    assistant: Assistant


@dataclass(frozen=True)
class Retry:
    error: UserInputError


MatchResult = Union[Found, Retry]


async def list_assistants(client: "AsyncAssistantsClient") -> List[Assistant]:
    """Fetch every assistant; a ``RemoteServiceError`` here is fatal for the session."""
    assistants = await client.list_assistants()
    logger.info("loaded %d assistants", len(assistants))
    return assistants


def describe_assistants(assistants: Sequence[Assistant]) -> str:
    names = ", ".join(a.name or a.id for a in assistants)
    return f"Available assistants are: {names}"


def match_assistant(assistants: Sequence[Assistant], name: str) -> MatchResult:
    """Exact, case-sensitive lookup by assistant name."""
    for assistant in assistants:
        if assistant.name == name:
            return Found(assistant)
    return Retry(UserInputError(f"No assistant named {name!r}"))


async def select_assistant(
    assistants: Sequence[Assistant],
    ask: Callable[[str], Awaitable[str]],
    console: "Console",
) -> Assistant:
    """Prompt until the typed name matches an assistant. Never gives up on its own."""
    while True:
        result = match_assistant(assistants, await ask(SELECT_PROMPT))
        if isinstance(result, Found):
            return result.assistant
        logger.debug("%s", result.error)
        console.print(NOT_FOUND_MESSAGE)


async def list_files_for(
    client: "AsyncAssistantsClient",
    assistant: Assistant,
    console: "Console",
) -> FileListing:
    """Print the numbered files attached to ``assistant`` and return the listing."""
    console.print(f"\nFiles available for assistant '{assistant.name}':")
    listing = await client.get_files(assistant.file_ids)
    for index, file in enumerate(listing.files, start=1):
        console.print(f"{index}. {file.filename} (ID: {file.id})")
    for file_id, error in listing.errors.items():
        console.print(f"Could not fetch file {file_id}: {error}")
    return listing
