"""
Runtime settings, read from the environment.

Entry points load a `.env` file first (python-dotenv), so every setting can
live there as well:

    MISSING_PERSONS_API_URL       upstream feed endpoint
    MISSING_PERSONS_TIMEOUT       request timeout in seconds (default 10)
    MISSING_PERSONS_RETRY_COUNT   fetch attempts before giving up (default 3)
    MISSING_PERSONS_RETRY_BACKOFF first retry delay in seconds (default 0.5)
    MISSING_PERSONS_PAGE_SIZE     cases per page (default 12)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .pagination import ITEMS_PER_PAGE

DEFAULT_API_URL = (
    "https://v8vxzw8638.execute-api.us-east-1.amazonaws.com/default/get_missingDatabase"
)
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_BACKOFF = 0.5


@dataclass(frozen=True)
class Settings:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    retry_count: int = DEFAULT_RETRY_COUNT
    retry_backoff: float = DEFAULT_RETRY_BACKOFF  # seconds, doubled per attempt
    page_size: int = ITEMS_PER_PAGE


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables, falling back to defaults.

    Raises:
        ConfigurationError: if a numeric setting is malformed or out of range.
    """
    env = os.environ if environ is None else environ

    retry_count = _read_number(env, "MISSING_PERSONS_RETRY_COUNT", int, DEFAULT_RETRY_COUNT)
    if retry_count < 1:
        raise ConfigurationError(
            "MISSING_PERSONS_RETRY_COUNT must be at least 1",
            details={"value": retry_count},
        )

    return Settings(
        api_url=env.get("MISSING_PERSONS_API_URL") or DEFAULT_API_URL,
        timeout=_read_number(env, "MISSING_PERSONS_TIMEOUT", float, DEFAULT_TIMEOUT),
        retry_count=retry_count,
        retry_backoff=_read_number(
            env, "MISSING_PERSONS_RETRY_BACKOFF", float, DEFAULT_RETRY_BACKOFF
        ),
        page_size=_read_number(env, "MISSING_PERSONS_PAGE_SIZE", int, ITEMS_PER_PAGE),
    )


def _read_number(env: Mapping[str, str], key: str, cast: type, default):
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigurationError(
            f"{key} must be a number, got '{raw}'", details={"key": key, "value": raw}
        ) from None
