"""Line oriented console used for prompts and replies."""

from __future__ import annotations

import asyncio
import sys
import threading
from types import TracebackType
from typing import Optional, TextIO


def _resolve(future: "asyncio.Future[str]", line: Optional[str], exc: Optional[BaseException]) -> None:
    if future.done():
        return
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(line)


class Console:
    """Prompts on an output stream and reads trimmed lines from an input stream.

    Each read blocks a daemon thread rather than an executor worker, so an
    interrupted session can shut its event loop down without waiting for a
    line that may never come.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._closed = False

    def __enter__(self) -> "Console":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    async def ask(self, prompt: str) -> str:
        """Write ``prompt`` and wait for the next line of input.

        Raises ``EOFError`` once the input stream is exhausted.
        """
        if self._closed:
            raise EOFError("console is closed")
        self._stdout.write(prompt)
        self._stdout.flush()
        line = await self._readline()
        if not line:
            raise EOFError("end of input")
        return line.strip()

    async def _readline(self) -> str:
        loop = asyncio.get_running_loop()
        future: "asyncio.Future[str]" = loop.create_future()

        def read() -> None:
            line: Optional[str] = None
            error: Optional[BaseException] = None
            try:
                line = self._stdin.readline()
            except Exception as exc:
                error = exc
            try:
                loop.call_soon_threadsafe(_resolve, future, line, error)
            except RuntimeError:
                # The loop finished while this thread was blocked.
                pass

        threading.Thread(target=read, name="console-reader", daemon=True).start()
        return await future

    def print(self, *parts: object) -> None:
        self._stdout.write(" ".join(str(part) for part in parts) + "\n")
        self._stdout.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # The real stdin belongs to the process; only detach from it.
        if self._stdin is not sys.stdin:
            self._stdin.close()
