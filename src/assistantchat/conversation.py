"""The interactive conversation loop for one selected assistant."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from .assistants import Assistant
from .exceptions import AssistantChatError, RunNotCompletedError
from .polling import RunPoller, raise_for_status
from .threads import CreateMessageOptions, CreateRunOptions, Message, Run, Thread

if TYPE_CHECKING:
    from .session import SessionContext

INPUT_PROMPT = "\nInput: "
NO_RESPONSE_MESSAGE = "No response from the assistant or unable to retrieve the message."

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    EXIT = "exit"
    NEW = "new"


class ConversationState(enum.Enum):
    AWAITING_INPUT = "awaiting_input"
    SENDING = "sending"
    RUNNING = "running"
    POLLING = "polling"
    DISPLAYING = "displaying"
    EXITED = "exited"
    RESTART_SELECTION = "restart_selection"


def parse_command(line: str) -> Optional[Outcome]:
    """Map ``exit``/``new`` (any case, surrounding space ignored) to an outcome."""
    word = line.strip().lower()
    for outcome in Outcome:
        if word == outcome.value:
            return outcome
    return None


def latest_reply(messages: Sequence[Message], run_id: str) -> Optional[Message]:
    """Newest assistant message produced by ``run_id``.

    ``messages`` must be ordered newest first, as the service returns them.
    """
    for message in messages:
        if message.role == "assistant" and message.run_id == run_id:
            return message
    return None


class Conversation:
    """Relays user lines to one remote thread until the user types exit or new."""

    def __init__(
        self,
        context: "SessionContext",
        assistant: Assistant,
        file_ids: Optional[Sequence[str]] = None,
    ) -> None:
        self._context = context
        self._assistant = assistant
        self._file_ids: List[str] = list(file_ids or [])
        self.thread: Optional[Thread] = None
        self.state = ConversationState.AWAITING_INPUT
        self.runs: List[Run] = []

    async def run(self) -> Outcome:
        console = self._context.console
        while True:
            self.state = ConversationState.AWAITING_INPUT
            try:
                line = await console.ask(INPUT_PROMPT)
            except EOFError:
                line = Outcome.EXIT.value

            command = parse_command(line)
            if command is Outcome.EXIT:
                self.state = ConversationState.EXITED
                return command
            if command is Outcome.NEW:
                self.state = ConversationState.RESTART_SELECTION
                return command
            if not line:
                continue

            try:
                await self.turn(line)
            except RunNotCompletedError as exc:
                logger.warning("run %s ended as %s", exc.run.id, exc.run.status)
                console.print(exc.message)
            except AssistantChatError as exc:
                logger.error("turn failed: %s", exc)
                console.print(f"Error: {exc.message}")

    async def _ensure_thread(self) -> Thread:
        if self.thread is None:
            self.thread = await self._context.client.create_thread()
            logger.info("created thread %s for assistant %s", self.thread.id, self._assistant.id)
        return self.thread

    async def turn(self, text: str) -> str:
        """Send one user line, wait for the run and print the reply."""
        client = self._context.client
        thread = await self._ensure_thread()

        self.state = ConversationState.SENDING
        await client.create_message(
            thread.id,
            CreateMessageOptions(content=text, file_ids=self._file_ids or None),
        )

        self.state = ConversationState.RUNNING
        run = await client.create_run(thread.id, CreateRunOptions(assistant_id=self._assistant.id))
        self.runs.append(run)

        self.state = ConversationState.POLLING
        poller = RunPoller(
            client,
            thread.id,
            run.id,
            poll_interval=self._context.settings.poll_interval,
            sleep=self._context.sleep,
            clock=self._context.clock,
        )
        run = raise_for_status(await poller.wait())

        self.state = ConversationState.DISPLAYING
        messages = await client.list_messages(thread.id)
        reply = latest_reply(messages.data, run.id)
        if reply is None or not reply.text:
            self._context.console.print(NO_RESPONSE_MESSAGE)
            return NO_RESPONSE_MESSAGE
        self._context.console.print(f"\nResponse:\n{reply.text}")
        return reply.text
