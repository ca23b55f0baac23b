from __future__ import annotations

import asyncio
import io
import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from assistantchat.async_client import AsyncAssistantsClient
from assistantchat.config import Settings
from assistantchat.console import Console
from assistantchat.session import SessionContext


TERMINAL = ("completed", "failed", "cancelled", "expired", "incomplete")


class FakeAssistantService:
    """In-memory stand-in for the assistant REST API behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.assistants: List[Dict[str, Any]] = []
        self.files: Dict[str, Dict[str, Any]] = {}
        self.file_delays: Dict[str, float] = {}
        self.failing_files: set[str] = set()
        self.threads: Dict[str, List[Dict[str, Any]]] = {}
        self.runs: Dict[str, Dict[str, Any]] = {}
        # Statuses handed out by successive GETs of a run before it settles.
        self.run_script: List[str] = ["in_progress", "completed"]
        self.reply_text = "Hi there!"
        self.reply_parts: Optional[List[Dict[str, Any]]] = None
        self.fail_paths: Dict[str, int] = {}
        # "METHOD /path" prefixes answered with a 200 and this raw, non-JSON body.
        self.raw_paths: Dict[str, str] = {}
        self.requests: List[httpx.Request] = []
        self.outstanding_runs = 0
        self.max_outstanding_runs = 0
        self._counter = 0

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}_{self._counter}"

    def add_assistant(self, name: str, assistant_id: str, file_ids: Optional[List[str]] = None) -> None:
        self.assistants.append(
            {"id": assistant_id, "object": "assistant", "name": name, "file_ids": file_ids or []}
        )

    def add_file(self, file_id: str, filename: str) -> None:
        self.files[file_id] = {"id": file_id, "object": "file", "filename": filename, "bytes": 10}

    def count(self, method: str, suffix: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path.endswith(suffix)
        )

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        for prefix, status in self.fail_paths.items():
            if path.startswith(prefix):
                return httpx.Response(status, json={"error": {"message": f"boom at {path}"}})
        for prefix, text in self.raw_paths.items():
            if f"{request.method} {path}".startswith(prefix):
                return httpx.Response(200, text=text)

        parts = path.strip("/").split("/")
        body = json.loads(request.content) if request.content else {}

        if parts == ["assistants"]:
            return self._assistant_page(request)

        if parts[0] == "files" and len(parts) == 2:
            file_id = parts[1]
            await asyncio.sleep(self.file_delays.get(file_id, 0))
            if file_id in self.failing_files or file_id not in self.files:
                return httpx.Response(404, json={"error": {"message": f"No such File object: {file_id}"}})
            return httpx.Response(200, json=self.files[file_id])

        if parts == ["threads"]:
            thread_id = self._next_id("thread")
            self.threads[thread_id] = []
            return httpx.Response(200, json={"id": thread_id, "object": "thread"})

        thread_id = parts[1]
        if parts[2:] == ["messages"] and request.method == "POST":
            message = {
                "id": self._next_id("msg"),
                "thread_id": thread_id,
                "role": body["role"],
                "content": [{"type": "text", "text": {"value": body["content"], "annotations": []}}],
                "file_ids": body.get("file_ids", []),
                "run_id": None,
            }
            self.threads[thread_id].append(message)
            return httpx.Response(200, json=message)

        if parts[2:] == ["messages"]:
            newest_first = list(reversed(self.threads[thread_id]))
            return httpx.Response(200, json={"object": "list", "data": newest_first})

        if parts[2:] == ["runs"]:
            if self.outstanding_runs:
                raise AssertionError("a run was started while another was still pending")
            run_id = self._next_id("run")
            run = {
                "id": run_id,
                "thread_id": thread_id,
                "assistant_id": body["assistant_id"],
                "status": "queued",
                "script": list(self.run_script),
            }
            self.runs[run_id] = run
            self.outstanding_runs += 1
            self.max_outstanding_runs = max(self.max_outstanding_runs, self.outstanding_runs)
            return httpx.Response(200, json={k: v for k, v in run.items() if k != "script"})

        if parts[2] == "runs" and len(parts) == 4:
            run = self.runs[parts[3]]
            if run["script"]:
                run["status"] = run["script"].pop(0)
            payload = {k: v for k, v in run.items() if k not in ("script", "settled")}
            if run["status"] == "failed":
                payload["last_error"] = {"code": "server_error", "message": "model overloaded"}
            if run["status"] in TERMINAL and not run.get("settled"):
                run["settled"] = True
                self.outstanding_runs -= 1
                if run["status"] == "completed":
                    self._reply(thread_id, run)
            return httpx.Response(200, json=payload)

        return httpx.Response(404, json={"error": {"message": f"unknown path {path}"}})

    def _assistant_page(self, request: httpx.Request) -> httpx.Response:
        limit = int(request.url.params.get("limit", 20))
        after = request.url.params.get("after")
        ids = [a["id"] for a in self.assistants]
        start = ids.index(after) + 1 if after else 0
        page = self.assistants[start : start + limit]
        return httpx.Response(
            200,
            json={
                "object": "list",
                "data": page,
                "first_id": page[0]["id"] if page else None,
                "last_id": page[-1]["id"] if page else None,
                "has_more": start + limit < len(self.assistants),
            },
        )

    def _reply(self, thread_id: str, run: Dict[str, Any]) -> None:
        if self.reply_parts is None and self.reply_text is None:
            return
        content = self.reply_parts or [
            {"type": "text", "text": {"value": self.reply_text, "annotations": []}}
        ]
        self.threads[thread_id].append(
            {
                "id": self._next_id("msg"),
                "thread_id": thread_id,
                "role": "assistant",
                "content": content,
                "run_id": run["id"],
                "assistant_id": run["assistant_id"],
            }
        )


async def no_sleep(_: float) -> None:
    return None


@pytest.fixture
def service() -> FakeAssistantService:
    return FakeAssistantService()


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="sk-test", base_url="https://api.test/v1", poll_interval=1.0)


def make_client(service: FakeAssistantService) -> AsyncAssistantsClient:
    return AsyncAssistantsClient(
        "sk-test",
        base_url="https://api.test/v1",
        transport=httpx.MockTransport(service.handler),
    )


def make_context(service: FakeAssistantService, settings: Settings, lines: str) -> SessionContext:
    console = Console(stdin=io.StringIO(lines), stdout=io.StringIO())
    return SessionContext(
        client=make_client(service),
        console=console,
        settings=settings,
        sleep=no_sleep,
    )


def output_of(context: SessionContext) -> str:
    return context.console._stdout.getvalue()
