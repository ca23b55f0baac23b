from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Dict, List, Optional

import httpx

from .assistants import Assistant, AssistantListResponse
from .exceptions import ConfigurationError, RemoteServiceError
from .files import File
from .types import ResponseHook
from .utils import decode_json, extract_error_message, parse_response, require_id

DEFAULT_BASE_URL = "https://api.openai.com/v1"
ASSISTANTS_BETA = "assistants=v1"

logger = logging.getLogger(__name__)


def _headers(api_key: str, organization: Optional[str] = None) -> Dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
        "OpenAI-Beta": ASSISTANTS_BETA,
    }
    if organization:
        headers["OpenAI-Organization"] = organization
    return headers


class AssistantsClient:
    """Synchronous assistant service client."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
        response_hook: Optional[ResponseHook] = None,
        organization: Optional[str] = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ConfigurationError("API key must be a non-empty string")

        self._api_key = api_key
        self._organization = organization
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._response_hook = response_hook

    def __enter__(self) -> "AssistantsClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        method: str,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"{self._base_url}{endpoint}"
        try:
            response = self._client.request(
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

    def list_assistants(self, limit: int = 100, order: str = "desc") -> List[Assistant]:
        """List every assistant defined for this account, following pagination."""
        assistants: List[Assistant] = []
        params: Dict[str, Any] = {"limit": limit, "order": order}
        while True:
            data = self._request("GET", "/assistants", params=params)
            page = parse_response(AssistantListResponse, data)
            assistants.extend(page.data)
            if not page.has_more or not page.last_id:
                return assistants
            params = {**params, "after": page.last_id}

    def get_file(self, file_id: str) -> File:
        """Get file metadata by ID."""
        require_id(file_id, "File ID")
        data = self._request("GET", f"/files/{file_id}")
        return parse_response(File, data)
