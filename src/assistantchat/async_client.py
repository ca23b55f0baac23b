from __future__ import annotations

import asyncio
import logging
from types import TracebackType
from typing import Any, Dict, List, Optional, Sequence

import httpx

from .assistants import Assistant, AssistantListResponse
from .exceptions import AssistantChatError, ConfigurationError, RemoteServiceError
from .files import File, FileListing
from .sync_client import DEFAULT_BASE_URL, _headers
from .threads import (
    CreateMessageOptions,
    CreateRunOptions,
    Message,
    MessageListResponse,
    Run,
    Thread,
)
from .types import ResponseHook
from .utils import decode_json, extract_error_message, parse_response, require_id

logger = logging.getLogger(__name__)


class AsyncAssistantsClient:
    """Asynchronous assistant service client."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        response_hook: Optional[ResponseHook] = None,
        organization: Optional[str] = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("API key must be a non-empty string")

        self._api_key = api_key
        self._organization = organization
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._response_hook = response_hook

    async def __aenter__(self) -> "AsyncAssistantsClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self._base_url}{endpoint}"
        try:
            response = await self._client.request(
                method=method,
                url=url,
                json=json,
                params=params,
                headers=_headers(self._api_key, self._organization),
                timeout=self._timeout,
            )
            if self._response_hook:
                self._response_hook(response)
            response.raise_for_status()
            return decode_json(response)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, endpoint)
            raise RemoteServiceError("Request timeout") from exc
        except httpx.HTTPStatusError as exc:
            message = extract_error_message(exc.response)
            logger.warning("%s %s failed: %s", method, endpoint, message)
            raise RemoteServiceError(message, status_code=exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, endpoint, exc)
            raise RemoteServiceError(f"Network error: {exc}") from exc

    # Assistant methods
    async def list_assistants(self, limit: int = 100, order: str = "desc") -> List[Assistant]:
        """List every assistant defined for this account, following pagination."""
        assistants: List[Assistant] = []
        params: Dict[str, Any] = {"limit": limit, "order": order}
        while True:
            data = await self._request("GET", "/assistants", params=params)
            page = parse_response(AssistantListResponse, data)
            assistants.extend(page.data)
            if not page.has_more or not page.last_id:
                return assistants
            params = {**params, "after": page.last_id}

    # File methods
    async def get_file(self, file_id: str) -> File:
        """Get file metadata by ID."""
        require_id(file_id, "File ID")
        data = await self._request("GET", f"/files/{file_id}")
        return parse_response(File, data)

    async def get_files(self, file_ids: Sequence[str]) -> FileListing:
        """Fetch metadata for several files at once.

        Requests are issued concurrently. The listing keeps the order of
        ``file_ids`` regardless of completion order, and each lookup that
        failed is reported in ``FileListing.errors`` instead of aborting the
        rest.
        """
        results = await asyncio.gather(
            *(self.get_file(file_id) for file_id in file_ids),
            return_exceptions=True,
        )
        listing = FileListing()
        for file_id, result in zip(file_ids, results):
            if isinstance(result, Exception):
                if not isinstance(result, AssistantChatError):
                    result = RemoteServiceError(str(result))
                logger.error("Error fetching file %s: %s", file_id, result)
                listing.errors[file_id] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                listing.files.append(result)
        return listing

    # Thread methods
    async def create_thread(self) -> Thread:
        """Create a new conversation thread."""
        data = await self._request("POST", "/threads", json={})
        return parse_response(Thread, data)

    async def create_message(self, thread_id: str, options: CreateMessageOptions) -> Message:
        """Append a message to a thread."""
        require_id(thread_id, "Thread ID")
        if not options.content.strip():
            raise AssistantChatError("Message content must be a non-empty string")
        data = await self._request(
            "POST", f"/threads/{thread_id}/messages", json=options.to_payload()
        )
        return parse_response(Message, data)

    async def list_messages(
        self,
        thread_id: str,
        limit: int = 20,
        order: str = "desc",
    ) -> MessageListResponse:
        """Get messages from a thread, newest first by default."""
        require_id(thread_id, "Thread ID")
        data = await self._request(
            "GET",
            f"/threads/{thread_id}/messages",
            params={"limit": limit, "order": order},
        )
        return parse_response(MessageListResponse, data)

    # Run methods
    async def create_run(self, thread_id: str, options: CreateRunOptions) -> Run:
        """Start a run of an assistant against a thread."""
        require_id(thread_id, "Thread ID")
        payload = options.model_dump(exclude_none=True)
        data = await self._request("POST", f"/threads/{thread_id}/runs", json=payload)
        return parse_response(Run, data)

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        """Get the current state of a run."""
        require_id(thread_id, "Thread ID")
        require_id(run_id, "Run ID")
        data = await self._request("GET", f"/threads/{thread_id}/runs/{run_id}")
        return parse_response(Run, data)
