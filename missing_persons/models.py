"""
Pydantic models for missing-person records and the views derived from them.

The upstream feed is an opaque collaborator, so every record field is
Optional: a case with no picture or no description is still a case. Derived
fields never overwrite feed fields; they live on separate view objects.
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# ─── Feed Record ────────────────────────────────────────────────────


class MissingPerson(BaseModel):
    """A missing-person case exactly as the upstream feed reports it.

    `case_id` is NOT unique in the raw feed: the same case may be reported
    by several platforms. `alternative_urls` is only set by deduplication.
    """

    model_config = ConfigDict(populate_by_name=True)

    case_id: Optional[int] = None
    platform: Optional[str] = None
    picture: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None
    id: Optional[int] = None
    name: Optional[str] = None
    alternative_urls: Optional[list[str]] = Field(default=None, alias="alternativeUrls")


# ─── Extraction Models ──────────────────────────────────────────────


class ExtractedFields(BaseModel):
    """Structured fields pulled out of a free-text description."""

    age: Optional[int] = None  # None = unknown
    location: str
    last_seen: str
    short_description: str = ""


class ProcessedMissingPerson(MissingPerson):
    """A deduplicated record plus the display fields derived from its description."""

    processed_age: Optional[int] = None
    processed_location: str
    processed_last_seen: str
    processed_description: str = ""


# ─── Views ──────────────────────────────────────────────────────────


class Page(BaseModel, Generic[T]):
    """One page of a view, plus everything a pager control needs to render."""

    items: list[T] = Field(default_factory=list)
    page: int = 1
    page_size: int
    total_items: int = 0
    total_pages: int = 0
    has_previous: bool = False
    has_next: bool = False
    show_controls: bool = False
    page_numbers: list[Union[int, str]] = Field(default_factory=list)


class Snapshot(BaseModel):
    """Immutable state of the data-loading service at one point in time."""

    model_config = ConfigDict(frozen=True)

    records: list[MissingPerson] = Field(default_factory=list)
    loading: bool = True  # No fetch has settled yet
    fetching: bool = False  # A fetch is in flight (initial or revalidation)
    error: Optional[str] = None
    last_updated: Optional[datetime] = None
    version: int = 0  # Sequence number of the request whose result is applied
