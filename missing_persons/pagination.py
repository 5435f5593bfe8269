"""
Fixed-size pagination and the compressed page-number strip.

    total=10, current=1  → [1, 2, 3, 4, "...", 10]
    total=10, current=5  → [1, "...", 4, 5, 6, "...", 10]
    total=10, current=10 → [1, "...", 7, 8, 9, 10]
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar, Union

from .models import Page

T = TypeVar("T")

ITEMS_PER_PAGE = 12
MAX_VISIBLE_PAGES = 5
GAP = "..."


def total_pages(count: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(count / page_size)


def clamp_page(page: int, total: int) -> int:
    """Clamp a 1-indexed page into 1..total (1 when there are no pages)."""
    return max(1, min(page, max(total, 1)))


def page_numbers(current: int, total: int) -> list[Union[int, str]]:
    """Page buttons to render, with GAP standing in for skipped ranges."""
    if total <= MAX_VISIBLE_PAGES:
        return list(range(1, total + 1))

    if current <= 3:
        return [1, 2, 3, 4, GAP, total]
    if current >= total - 2:
        return [1, GAP, *range(total - 3, total + 1)]
    return [1, GAP, current - 1, current, current + 1, GAP, total]


def paginate(items: Sequence[T], page: int = 1, page_size: int = ITEMS_PER_PAGE) -> Page[T]:
    """Slice one page out of `items`.

    Out-of-range pages are clamped. A page_size <= 0 disables paging: every
    item lands on a single page and the controls are hidden.
    """
    count = len(items)

    if page_size <= 0:
        return Page(
            items=list(items),
            page=1,
            page_size=page_size,
            total_items=count,
            total_pages=1 if count else 0,
        )

    pages = total_pages(count, page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size

    return Page(
        items=list(items[start:start + page_size]),
        page=current,
        page_size=page_size,
        total_items=count,
        total_pages=pages,
        has_previous=current > 1,
        has_next=current < pages,
        show_controls=pages > 1,
        page_numbers=page_numbers(current, pages) if pages > 1 else [],
    )
