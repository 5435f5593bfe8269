"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from missing_persons.exceptions import DataUnavailableError  # noqa: E402


@pytest.fixture(autouse=True)
def _no_upstream_calls():
    """Prevent real feed requests during tests — a store without an explicit
    fetcher sees the upstream as unavailable."""
    with patch(
        "missing_persons.store.fetch_missing_persons",
        side_effect=DataUnavailableError(details={"reason": "network disabled in tests"}),
    ):
        yield
