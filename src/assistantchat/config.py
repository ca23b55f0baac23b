"""Settings loaded from the environment and an optional ``.env`` file."""

from __future__ import annotations

import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError
from .polling import DEFAULT_POLL_INTERVAL
from .sync_client import DEFAULT_BASE_URL

API_KEY_ENV = "OPENAI_API_KEY"
BASE_URL_ENV = "OPENAI_BASE_URL"
ORGANIZATION_ENV = "OPENAI_ORG_ID"
POLL_INTERVAL_ENV = "ASSISTANTCHAT_POLL_INTERVAL"


class Settings(BaseModel):
    api_key: str = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    organization: Optional[str] = None
    poll_interval: float = Field(DEFAULT_POLL_INTERVAL, gt=0)
    timeout: float = Field(30.0, gt=0)


def load_settings(env_file: Optional[str] = None, **overrides: Any) -> Settings:
    """Build ``Settings`` from the environment.

    Values already present in the environment win over the ``.env`` file,
    and non-None keyword overrides win over both.
    """
    load_dotenv(env_file, override=False)

    values: dict[str, Any] = {
        "api_key": os.getenv(API_KEY_ENV, "").strip(),
        "base_url": os.getenv(BASE_URL_ENV) or DEFAULT_BASE_URL,
        "organization": os.getenv(ORGANIZATION_ENV) or None,
    }
    poll_interval = os.getenv(POLL_INTERVAL_ENV)
    if poll_interval:
        values["poll_interval"] = poll_interval
    values.update({key: value for key, value in overrides.items() if value is not None})

    if not values["api_key"]:
        raise ConfigurationError(
            f"No API key found. Set {API_KEY_ENV} in the environment or a .env file."
        )
    try:
        return Settings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
