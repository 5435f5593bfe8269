"""
Missing Persons Browser — FastAPI Server
========================================

Read-only API over the upstream missing-persons feed.

Endpoints:
    GET  /persons               All cases, or search results when ?q= is set
    GET  /persons/recent        Cases last seen in the current year
    GET  /persons/{case_id}     One merged case with all of its source URLs
    POST /refresh               Manual retry / revalidation of the feed
    GET  /health                Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from missing_persons import __version__
from missing_persons.config import load_settings
from missing_persons.models import MissingPerson, Page, ProcessedMissingPerson
from missing_persons.pipeline import MissingPersonsPipeline, Tab
from missing_persons.store import MissingPersonsStore

load_dotenv()

NOT_FOUND_MESSAGE = "ไม่พบข้อมูลบุคคลสูญหาย"


# ─── Application Lifespan (pre-warm store) ──────────────────────────

_store: MissingPersonsStore | None = None
_pipeline: MissingPersonsPipeline | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the store and load the feed once on startup."""
    global _store, _pipeline  # noqa: PLW0603
    settings = load_settings()
    _store = MissingPersonsStore(settings=settings)
    _pipeline = MissingPersonsPipeline(page_size=settings.page_size)
    await asyncio.to_thread(_store.refetch)
    yield
    _store = None
    _pipeline = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Missing Persons Browser API",
    description=(
        "Browse, search and page through missing-person cases. "
        "Duplicate reports are merged per case, and age, location and "
        "last-seen date are extracted from each free-text description."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Response Schemas ───────────────────────────────────────────────


class PersonOut(ProcessedMissingPerson):
    """API-facing case (inherits all fields from ProcessedMissingPerson)."""


class PersonPage(Page[PersonOut]):
    """One page of cases plus pager state."""

    tab: Tab
    search_term: Optional[str] = None


class RefreshResponse(BaseModel):
    loading: bool
    fetching: bool
    error: Optional[str] = None
    records_loaded: int
    last_updated: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    records_loaded: int
    last_updated: Optional[datetime] = None
    error: Optional[str] = Field(default=None, description="Localized fetch error, if any")


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_store() -> MissingPersonsStore:
    if _store is None:
        raise HTTPException(status_code=503, detail="Store not initialised")
    return _store


def _get_pipeline() -> MissingPersonsPipeline:
    if _pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return _pipeline


def _available_records() -> list[MissingPerson]:
    """Current records, or 503 when the feed has never loaded successfully."""
    snapshot = _get_store().get_snapshot()
    if snapshot.error and not snapshot.records:
        raise HTTPException(status_code=503, detail=snapshot.error)
    return snapshot.records


def _build_page(page: Page[ProcessedMissingPerson], tab: Tab, search_term: str | None) -> PersonPage:
    """Convert a pipeline page to the API response schema."""
    return PersonPage(
        **page.model_dump(exclude={"items"}),
        items=[PersonOut.model_validate(p, from_attributes=True) for p in page.items],
        tab=tab,
        search_term=search_term,
    )


# ─── Endpoints ───────────────────────────────────────────────────────


@app.get(
    "/persons",
    summary="List or search missing-person cases",
    tags=["Cases"],
    responses={503: {"description": "Upstream data unavailable"}},
)
def list_persons(
    q: Optional[str] = Query(default=None, description="Search by name, description or location"),
    page: int = Query(default=1, description="1-indexed page; out-of-range values are clamped"),
) -> PersonPage:
    """All merged cases, or the cases matching `q` when it is not blank."""
    records = _available_records()
    tab = Tab.SEARCH if q and q.strip() else Tab.MISSING
    result = _get_pipeline().browse(records, tab=tab, search_term=q, page=page)
    return _build_page(result, tab, q)


@app.get(
    "/persons/recent",
    summary="Cases last seen in the current year",
    tags=["Cases"],
    responses={503: {"description": "Upstream data unavailable"}},
)
def list_recent_persons(page: int = Query(default=1)) -> PersonPage:
    records = _available_records()
    result = _get_pipeline().browse(records, tab=Tab.RECENT, page=page)
    return _build_page(result, Tab.RECENT, None)


@app.get(
    "/persons/{case_id}",
    summary="One case with all of its source URLs",
    tags=["Cases"],
    responses={
        404: {"description": "No case with this identifier"},
        503: {"description": "Upstream data unavailable"},
    },
)
def get_person(case_id: str) -> PersonOut:
    records = _available_records()
    person = _get_pipeline().find_by_case_id(records, case_id)
    if person is None:
        raise HTTPException(status_code=404, detail=f"{NOT_FOUND_MESSAGE}: {case_id}")
    return PersonOut.model_validate(person, from_attributes=True)


@app.post(
    "/refresh",
    summary="Fetch the upstream feed again",
    tags=["System"],
    responses={503: {"description": "Store not yet initialised"}},
)
async def refresh() -> RefreshResponse:
    """Manual retry. Safe to call repeatedly; the newest request wins."""
    snapshot = await asyncio.to_thread(_get_store().refetch)
    return RefreshResponse(
        loading=snapshot.loading,
        fetching=snapshot.fetching,
        error=snapshot.error,
        records_loaded=len(snapshot.records),
        last_updated=snapshot.last_updated,
    )


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Store not yet initialised"}},
)
def health_check() -> HealthResponse:
    snapshot = _get_store().get_snapshot()
    return HealthResponse(
        status="degraded" if snapshot.error else "healthy",
        version=__version__,
        records_loaded=len(snapshot.records),
        last_updated=snapshot.last_updated,
        error=snapshot.error,
    )
