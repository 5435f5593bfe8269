"""
Convert ISO-style Gregorian dates to Thai display dates.

    "2024-03-05" → "5 มีนาคม 2567"

Thai dates are written with the Buddhist Era year (Gregorian + 543) and the
full Thai month name. Anything that is not three numeric dash-separated
parts is rejected with ValueError; callers decide what to show instead.
"""

from __future__ import annotations

# ─── Lookup Tables ──────────────────────────────────────────────────

THAI_MONTHS: tuple[str, ...] = (
    "มกราคม",
    "กุมภาพันธ์",
    "มีนาคม",
    "เมษายน",
    "พฤษภาคม",
    "มิถุนายน",
    "กรกฎาคม",
    "สิงหาคม",
    "กันยายน",
    "ตุลาคม",
    "พฤศจิกายน",
    "ธันวาคม",
)

BUDDHIST_ERA_OFFSET = 543


def to_buddhist_year(gregorian_year: int) -> int:
    return gregorian_year + BUDDHIST_ERA_OFFSET


def format_thai_date(value: str) -> str:
    """Format a 'YYYY-MM-DD' string as '{day} {Thai month} {BE year}'.

    Leading zeros are dropped from the day. The parts are parsed as plain
    integers, so '2024-3-5' is accepted as well.

    Raises:
        ValueError: if the value does not split into three numeric parts
            or the month is outside 1..12.
    """
    parts = value.strip().split("-")
    if len(parts) != 3:
        raise ValueError(f"Expected YYYY-MM-DD, got: '{value}'")

    try:
        year, month, day = (int(part) for part in parts)
    except ValueError:
        raise ValueError(f"Non-numeric date part in: '{value}'") from None

    if not 1 <= month <= len(THAI_MONTHS):
        raise ValueError(f"Month out of range in: '{value}'")

    return f"{day} {THAI_MONTHS[month - 1]} {to_buddhist_year(year)}"
