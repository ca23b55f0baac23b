from __future__ import annotations

from typing import Any, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .exceptions import AssistantChatError, RemoteServiceError

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract_error_message(response: httpx.Response) -> str:
    """Pull the human readable message out of an API error response."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if body.get("message"):
            return str(body["message"])
    return f"HTTP {response.status_code}"


def decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise RemoteServiceError(
            f"Malformed response from {response.request.url.path}: not JSON",
            status_code=response.status_code,
        ) from exc


def parse_response(model: Type[ModelT], data: Any) -> ModelT:
    """Validate ``data`` as ``model``, reporting unexpected payloads as service errors."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RemoteServiceError(
            f"Unexpected {model.__name__} payload: {exc.error_count()} validation error(s)"
        ) from exc


def require_id(value: str, what: str) -> str:
    if not str(value).strip():
        raise AssistantChatError(f"{what} must be a non-empty string")
    return value
