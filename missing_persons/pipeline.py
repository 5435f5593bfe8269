"""
Record-processing pipeline: turns one feed snapshot into browsable views.

Flow:
  ┌───────────┐
  │ Raw feed  │   ← list of MissingPerson (may repeat case_id, may hold None)
  └─────┬─────┘
        │
  ┌─────▼─────┐
  │  Dedup    │   ← one record per case, source URLs merged
  └─────┬─────┘
        │
   ┌────┴──────────────┬──────────────┐
   │                   │              │
 ┌─▼──────┐      ┌─────▼────┐   ┌─────▼────┐
 │  All   │      │  Recent  │   │  Search  │   ← views
 └─┬──────┘      └─────┬────┘   └─────┬────┘
   └────────┬──────────┴──────────────┘
            │
     ┌──────▼──────┐
     │  Extract    │   ← age / location / last seen / short description
     └──────┬──────┘
            │
     ┌──────▼──────┐
     │  Paginate   │   ← fixed-size page + page-number strip
     └─────────────┘

Design principles:
  - Every stage is a pure function of its inputs. No I/O, no shared state.
  - Views are recomputed from the latest snapshot whenever it, the search
    term or the page changes. Nothing is cached or persisted.
"""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum

from .dedup import deduplicate
from .extractor import extract_fields
from .models import MissingPerson, Page, ProcessedMissingPerson
from .pagination import ITEMS_PER_PAGE, paginate
from .search import filter_missing_persons, get_recent_missing_persons

logger = logging.getLogger(__name__)


class Tab(str, Enum):
    """Which view of the record set is being browsed."""

    MISSING = "missing"  # Every case
    RECENT = "recent"  # Last seen this year
    SEARCH = "search"  # Matches the search term


def process_person(person: MissingPerson) -> ProcessedMissingPerson:
    """Attach the derived display fields to a copy of one record."""
    fields = extract_fields(person.description)
    return ProcessedMissingPerson(
        **person.model_dump(),
        processed_age=fields.age,
        processed_location=fields.location,
        processed_last_seen=fields.last_seen,
        processed_description=fields.short_description,
    )


class MissingPersonsPipeline:
    """Builds the browsable views over one feed snapshot.

    Usage:
        pipeline = MissingPersonsPipeline()
        page = pipeline.browse(snapshot.records, search_term="สมชาย", page=2)
        for person in page.items:
            print(person.name, person.processed_location)
    """

    def __init__(self, page_size: int = ITEMS_PER_PAGE):
        self.page_size = page_size

    # ─── Views ──────────────────────────────────────────────────────

    def process(self, records: list[MissingPerson | None]) -> list[ProcessedMissingPerson]:
        """Deduplicate and extract: the 'all cases' view."""
        return [process_person(p) for p in deduplicate(records)]

    def recent_view(
        self, records: list[MissingPerson | None], today: date | None = None
    ) -> list[ProcessedMissingPerson]:
        recent = get_recent_missing_persons(deduplicate(records), today=today)
        return [process_person(p) for p in recent]

    def search_view(
        self, records: list[MissingPerson | None], search_term: str | None
    ) -> list[ProcessedMissingPerson]:
        """Matches for a search term. A blank term has no results to show."""
        if not search_term or not search_term.strip():
            return []
        matches = filter_missing_persons(deduplicate(records), search_term)
        return [process_person(p) for p in matches]

    def page(self, view: list[ProcessedMissingPerson], page: int = 1) -> Page[ProcessedMissingPerson]:
        return paginate(view, page, self.page_size)

    # ─── Entry Points ───────────────────────────────────────────────

    def browse(
        self,
        records: list[MissingPerson | None],
        *,
        tab: Tab = Tab.MISSING,
        search_term: str | None = None,
        page: int = 1,
        today: date | None = None,
    ) -> Page[ProcessedMissingPerson]:
        """Build one page of the requested view.

        A non-blank search term always selects the search view, the way the
        search box switches tabs as the visitor types.
        """
        if search_term and search_term.strip():
            tab = Tab.SEARCH

        if tab == Tab.SEARCH:
            view = self.search_view(records, search_term)
        elif tab == Tab.RECENT:
            view = self.recent_view(records, today=today)
        else:
            view = self.process(records)

        logger.debug("View %s has %d case(s)", tab.value, len(view))
        return self.page(view, page)

    def find_by_case_id(
        self, records: list[MissingPerson | None], case_id: str | int
    ) -> ProcessedMissingPerson | None:
        """Detail lookup: the merged record for one case identifier."""
        wanted = str(case_id)
        for person in deduplicate(records):
            if person.case_id is not None and str(person.case_id) == wanted:
                return process_person(person)
        return None
