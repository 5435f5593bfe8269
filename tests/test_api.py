"""
FastAPI endpoint tests for the Missing Persons Browser API.

Uses httpx + FastAPI TestClient — no real server needed, no upstream calls.
"""

from __future__ import annotations

from datetime import date
from unittest.mock import patch

import api
import pytest
from api import app
from fastapi.testclient import TestClient

from missing_persons.client import fetch_missing_persons
from missing_persons.config import Settings
from missing_persons.exceptions import DATA_UNAVAILABLE_MESSAGE, DataUnavailableError
from missing_persons.models import MissingPerson
from missing_persons.pipeline import MissingPersonsPipeline
from missing_persons.store import MissingPersonsStore

client = TestClient(app)

THIS_YEAR = date.today().year


def _feed() -> list[MissingPerson | None]:
    feed: list[MissingPerson | None] = [
        MissingPerson(
            case_id=101,
            platform="thaimissing",
            url="a.com",
            name="สมชาย ใจดี",
            description=(
                "อายุปัจจุบัน: 34 ปี\n"
                "สถานที่หายตัว: กรุงเทพมหานคร\n"
                f"วันที่หายตัว: {THIS_YEAR}-03-05\n"
                "สวมเสื้อสีแดง"
            ),
        ),
        MissingPerson(case_id=101, platform="backtohome", url="b.com", name="สมชาย ใจดี"),
        None,
        MissingPerson(case_id=102, url="c.com", name="Malee", description="Last seen in Bangkok"),
    ]
    feed.extend(
        MissingPerson(
            case_id=300 + i,
            url=f"https://example.org/{300 + i}",
            name=f"Case {300 + i}",
            description="วันที่หายตัว: 2015-06-01",
        )
        for i in range(20)
    )
    return feed


def _install(fetcher) -> MissingPersonsStore:
    store = MissingPersonsStore(fetcher=fetcher, settings=Settings(retry_backoff=0))
    store.refetch()
    api._store = store
    api._pipeline = MissingPersonsPipeline()
    return store


@pytest.fixture(autouse=True)
def _warm_store():
    """Initialise the store per test (bypasses lifespan)."""
    _install(_feed)
    yield
    api._store = None
    api._pipeline = None


@pytest.fixture
def unavailable() -> None:
    def down():
        raise DataUnavailableError(status_code=502)

    _install(down)


class TestHealthEndpoint:
    def test_health_returns_200(self) -> None:
        assert client.get("/health").status_code == 200

    def test_health_response_shape(self) -> None:
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert data["records_loaded"] == 23
        assert data["last_updated"] is not None

    def test_health_degraded_when_feed_down(self, unavailable) -> None:
        data = client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["error"] == DATA_UNAVAILABLE_MESSAGE

    def test_uninitialised_returns_503(self) -> None:
        api._store = None
        assert client.get("/health").status_code == 503


class TestListEndpoint:
    def test_first_page(self) -> None:
        data = client.get("/persons").json()
        assert data["tab"] == "missing"
        assert data["total_items"] == 22
        assert data["total_pages"] == 2
        assert len(data["items"]) == 12
        assert data["has_previous"] is False
        assert data["has_next"] is True
        assert data["page_numbers"] == [1, 2]

    def test_merged_case_carries_alternative_urls(self) -> None:
        first = client.get("/persons").json()["items"][0]
        assert first["case_id"] == 101
        assert first["alternativeUrls"] == ["a.com", "b.com"]
        assert first["processed_age"] == 34
        assert first["processed_location"] == "กรุงเทพมหานคร"
        assert first["processed_description"] == "สวมเสื้อสีแดง"

    def test_out_of_range_page_is_clamped(self) -> None:
        data = client.get("/persons", params={"page": 99}).json()
        assert data["page"] == 2
        assert len(data["items"]) == 10

    def test_search(self) -> None:
        data = client.get("/persons", params={"q": "bangkok"}).json()
        assert data["tab"] == "search"
        assert data["search_term"] == "bangkok"
        assert [p["case_id"] for p in data["items"]] == [102]
        assert data["show_controls"] is False

    def test_search_without_match(self) -> None:
        data = client.get("/persons", params={"q": "no-such-person"}).json()
        assert data["items"] == []
        assert data["total_items"] == 0

    def test_blank_search_lists_everything(self) -> None:
        data = client.get("/persons", params={"q": "   "}).json()
        assert data["tab"] == "missing"
        assert data["total_items"] == 22

    def test_feed_down_returns_503(self, unavailable) -> None:
        resp = client.get("/persons")
        assert resp.status_code == 503
        assert resp.json()["detail"] == DATA_UNAVAILABLE_MESSAGE


class TestRecentEndpoint:
    def test_only_current_year(self) -> None:
        data = client.get("/persons/recent").json()
        assert data["tab"] == "recent"
        assert [p["case_id"] for p in data["items"]] == [101]


class TestDetailEndpoint:
    def test_found(self) -> None:
        data = client.get("/persons/101").json()
        assert data["name"] == "สมชาย ใจดี"
        assert data["alternativeUrls"] == ["a.com", "b.com"]
        assert data["processed_last_seen"].endswith(str(THIS_YEAR + 543))

    def test_not_found(self) -> None:
        resp = client.get("/persons/999")
        assert resp.status_code == 404
        assert "999" in resp.json()["detail"]


class TestRefreshEndpoint:
    def test_refresh_reloads(self) -> None:
        data = client.post("/refresh").json()
        assert data["error"] is None
        assert data["loading"] is False
        assert data["records_loaded"] == 23

    def test_refresh_recovers_after_outage(self, unavailable) -> None:
        assert client.get("/persons").status_code == 503
        api._store._fetcher = _feed  # upstream is back
        data = client.post("/refresh").json()
        assert data["error"] is None
        assert client.get("/persons").status_code == 200


class TestLifespan:
    def test_startup_survives_bad_feed_url(self, monkeypatch) -> None:
        monkeypatch.setenv("MISSING_PERSONS_API_URL", "http://[::1")
        monkeypatch.setenv("MISSING_PERSONS_RETRY_COUNT", "1")
        monkeypatch.setenv("MISSING_PERSONS_RETRY_BACKOFF", "0")
        with patch("missing_persons.store.fetch_missing_persons", fetch_missing_persons):
            with TestClient(app) as started:
                data = started.get("/health").json()
                assert data["status"] == "degraded"
                assert data["error"] == DATA_UNAVAILABLE_MESSAGE
                assert started.get("/persons").status_code == 503
