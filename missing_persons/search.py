"""
Views over the deduplicated record set: free-text search and recent cases.

Both selectors preserve input order and skip None entries.
"""

from __future__ import annotations

from datetime import date

from .extractor import extract_location
from .models import MissingPerson

# The literal marker used by the recent-case check (see get_recent_missing_persons).
_LAST_SEEN_MARKER = "วันที่หายตัว: "


def filter_missing_persons(
    records: list[MissingPerson], search_term: str | None
) -> list[MissingPerson]:
    """Case-insensitive substring search over name, description and location.

    A blank (or whitespace-only) term returns `records` itself, unchanged.
    """
    if not search_term or not search_term.strip():
        return records

    term = search_term.lower()
    return [
        person
        for person in records
        if person is not None and _matches(person, term)
    ]


def _matches(person: MissingPerson, term: str) -> bool:
    if person.name and term in person.name.lower():
        return True
    if person.description and term in person.description.lower():
        return True
    return term in extract_location(person.description).lower()


def get_recent_missing_persons(
    records: list[MissingPerson] | None, today: date | None = None
) -> list[MissingPerson]:
    """Cases whose last-seen marker carries the current Gregorian year.

    NOTE: this is a plain substring check on 'วันที่หายตัว: YYYY', not a
    date-range filter. A case from January still counts as recent in
    December.
    """
    if not records:
        return []

    year = (today or date.today()).year
    needle = f"{_LAST_SEEN_MARKER}{year}"
    return [
        person
        for person in records
        if person is not None and person.description and needle in person.description
    ]
