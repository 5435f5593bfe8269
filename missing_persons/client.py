"""
HTTP client for the upstream missing-persons feed.

The feed is one GET endpoint that returns the whole dataset as a JSON array.
No parameters are sent. Any failure (bad URL, transport error, non-2xx status,
a body that is not a JSON array) is reported as DataUnavailableError; callers
never have to tell transient and permanent failures apart.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from .config import DEFAULT_API_URL, DEFAULT_TIMEOUT
from .exceptions import DataUnavailableError
from .models import MissingPerson

logger = logging.getLogger(__name__)


def fetch_missing_persons(
    url: str | None = None,
    *,
    client: httpx.Client | None = None,
    timeout: float | None = None,
) -> list[MissingPerson | None]:
    """Fetch the full feed.

    Args:
        url: Feed endpoint. Defaults to DEFAULT_API_URL.
        client: Optional pre-built httpx.Client (tests pass one with a
            MockTransport). A client created here is closed on return.
        timeout: Request timeout in seconds.

    Returns:
        The feed entries in upstream order. `null` entries are kept as None
        so that deduplication can skip them. Entries that do not fit the
        record shape are logged and dropped; the rest of the feed survives.

    Raises:
        DataUnavailableError: on any transport, status or body error.
    """
    target = url or DEFAULT_API_URL
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout or DEFAULT_TIMEOUT)

    try:
        response = http.get(target, headers={"Cache-Control": "no-store"})
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("Error fetching missing persons: %s", e)
        raise DataUnavailableError(details={"url": target, "reason": str(e)}) from e
    finally:
        if owns_client:
            http.close()

    if not response.is_success:
        logger.error("API error: %s", response.status_code)
        raise DataUnavailableError(
            status_code=response.status_code,
            details={"url": target, "status": response.status_code},
        )

    try:
        data = response.json()
    except ValueError as e:
        logger.error("Feed body is not JSON: %s", e)
        raise DataUnavailableError(details={"url": target, "reason": "invalid JSON"}) from e

    if not isinstance(data, list):
        logger.error("Feed body is %s, expected a JSON array", type(data).__name__)
        raise DataUnavailableError(details={"url": target, "reason": "not an array"})

    records: list[MissingPerson | None] = []
    for index, entry in enumerate(data):
        if entry is None:
            records.append(None)
            continue
        try:
            records.append(MissingPerson.model_validate(entry))
        except ValidationError as e:
            logger.warning("Skipping feed entry %d, unexpected shape: %s", index, e)

    logger.info("Fetched %d missing-person records", len(records))
    return records
