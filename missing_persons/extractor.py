"""
Deterministic marker-based extraction from free-text case descriptions.

Upstream descriptions are newline-delimited text in which a few lines carry
structured data behind a fixed Thai prefix ("marker"):

    อายุปัจจุบัน: 34 ปี
    สถานที่หายตัว: กรุงเทพมหานคร
    วันที่หายตัว: 2024-03-05

Every marker is a versioned MarkerRule in MARKER_RULES. When the upstream
wording drifts, add a new rule version here; nothing else has to change.

Philosophy: extraction is TOTAL. A missing or malformed marker degrades to a
documented default value, never to an exception.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .models import ExtractedFields
from .thai_dates import format_thai_date

# Shown when a description carries no location or last-seen marker.
UNSPECIFIED = "ไม่ระบุ"

SHORT_DESCRIPTION_LIMIT = 100
ELLIPSIS = "..."


# ─── Marker Rules ───────────────────────────────────────────────────


@dataclass(frozen=True)
class MarkerRule:
    """One parsing rule for one marker.

    `pattern` captures the value in group 1. `line` matches the whole marker
    line including its trailing newline, for stripping.
    """

    name: str
    version: int
    pattern: re.Pattern[str]
    line: re.Pattern[str]

    def search(self, text: str) -> str | None:
        match = self.pattern.search(text)
        return match.group(1) if match else None

    def strip(self, text: str) -> str:
        return self.line.sub("", text)


def _rule(name: str, version: int, marker: str, value: str, suffix: str = "") -> MarkerRule:
    prefix = re.escape(marker)
    suffix = re.escape(suffix)
    return MarkerRule(
        name=name,
        version=version,
        pattern=re.compile(rf"{prefix}({value}){suffix}"),
        line=re.compile(rf"{prefix}{value}{suffix}\n?"),
    )


CURRENT_AGE = _rule("current_age", 1, "อายุปัจจุบัน: ", r"[0-9]+", " ปี")
AGE_AT_DISAPPEARANCE = _rule("age_at_disappearance", 1, "อายุขณะหายตัว: ", r"[0-9]+", " ปี")
LOCATION = _rule("location", 1, "สถานที่หายตัว: ", r"[^\n]+")
LAST_SEEN = _rule("last_seen", 1, "วันที่หายตัว: ", r"[^\n]+")

MARKER_RULES: tuple[MarkerRule, ...] = (
    CURRENT_AGE,
    AGE_AT_DISAPPEARANCE,
    LOCATION,
    LAST_SEEN,
)


# ─── Public API ─────────────────────────────────────────────────────


def extract_fields(description: str | None) -> ExtractedFields:
    """Extract every display field from one description.

    Args:
        description: The raw description text (may be None or empty).

    Returns:
        ExtractedFields with defaults for anything that could not be found.
    """
    return ExtractedFields(
        age=extract_age(description),
        location=extract_location(description),
        last_seen=extract_last_seen(description),
        short_description=extract_short_description(description),
    )


def extract_age(description: str | None) -> int | None:
    """Current age, falling back to the age at disappearance. None = unknown."""
    if not description:
        return None

    for rule in (CURRENT_AGE, AGE_AT_DISAPPEARANCE):
        value = rule.search(description)
        if value is not None:
            return int(value)
    return None


def extract_location(description: str | None) -> str:
    """Place of disappearance, or UNSPECIFIED."""
    if not description:
        return UNSPECIFIED

    value = LOCATION.search(description)
    if value is None or not value.strip():
        return UNSPECIFIED
    return value.strip()


def extract_last_seen(description: str | None) -> str:
    """Date of disappearance as a Thai date string.

    A value that is not a parseable YYYY-MM-DD is returned exactly as
    written; a missing marker yields UNSPECIFIED.
    """
    if not description:
        return UNSPECIFIED

    value = LAST_SEEN.search(description)
    if value is None:
        return UNSPECIFIED

    try:
        return format_thai_date(value)
    except ValueError:
        return value


def extract_short_description(description: str | None) -> str:
    """The description without its marker lines, capped at 100 characters."""
    if not description:
        return ""

    text = description
    for rule in MARKER_RULES:
        text = rule.strip(text)
    text = text.strip()

    if len(text) > SHORT_DESCRIPTION_LIMIT:
        return text[:SHORT_DESCRIPTION_LIMIT] + ELLIPSIS
    return text
