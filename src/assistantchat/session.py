"""Top level session: choose an assistant, talk, repeat until exit."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from .assistants import Assistant
from .async_client import AsyncAssistantsClient
from .config import Settings
from .console import Console
from .conversation import Conversation, Outcome
from .directory import describe_assistants, list_assistants, list_files_for, select_assistant
from .types import ClockFunc, SleepFunc

GOODBYE_MESSAGE = "\nGoodbye!\n"

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Everything a session needs, built once at startup and closed once."""

    client: AsyncAssistantsClient
    console: Console
    settings: Settings
    sleep: SleepFunc = asyncio.sleep
    clock: ClockFunc = time.monotonic
    _closed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_settings(cls, settings: Settings, console: Optional[Console] = None) -> "SessionContext":
        client = AsyncAssistantsClient(
            settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
            organization=settings.organization,
        )
        return cls(client=client, console=console or Console(), settings=settings)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.console.close()
        await self.client.close()


class Session:
    """Runs assistant selection and conversations until the user exits."""

    def __init__(self, context: SessionContext) -> None:
        self._context = context
        self.assistant: Optional[Assistant] = None
        self.file_ids: List[str] = []
        self.conversations: List[Conversation] = []

    async def run(self) -> int:
        console = self._context.console
        assistants = await list_assistants(self._context.client)

        while True:
            if self.assistant is None:
                console.print(describe_assistants(assistants))
                try:
                    self.assistant = await select_assistant(assistants, console.ask, console)
                except EOFError:
                    break
                listing = await list_files_for(self._context.client, self.assistant, console)
                self.file_ids = listing.file_ids
                console.print(f"\nWelcome! You are now using the assistant: {self.assistant.name}\n")

            conversation = Conversation(self._context, self.assistant, self.file_ids)
            self.conversations.append(conversation)
            outcome = await conversation.run()
            if outcome is Outcome.EXIT:
                break
            logger.info("restarting assistant selection")
            self.assistant = None
            self.file_ids = []

        console.print(GOODBYE_MESSAGE)
        return 0
