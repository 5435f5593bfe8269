#!/usr/bin/env python3
"""
Missing Persons Browser — Entry Point
=====================================

Fetches the upstream feed and prints one page of merged cases. This is a
demo; the supported interface is the HTTP API in api.py.

Usage:
    python main.py                      # First page of every case
    python main.py กรุงเทพ              # Search by name, description or location
    python main.py --recent             # Cases last seen this year
    python main.py --page 3             # Any view, third page
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from missing_persons.config import load_settings
from missing_persons.models import Page, ProcessedMissingPerson
from missing_persons.pagination import GAP
from missing_persons.pipeline import MissingPersonsPipeline, Tab
from missing_persons.store import MissingPersonsStore

load_dotenv()


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _print_person(person: ProcessedMissingPerson) -> None:
    """Print one case card."""
    age = person.processed_age if person.processed_age is not None else "-"
    print(f"  {_BOLD}{person.name or '-'}{_RESET}  {_DIM}#{person.case_id}{_RESET}")
    print(f"    อายุ:        {age}")
    print(f"    สถานที่:     {person.processed_location}")
    print(f"    วันที่หายตัว: {person.processed_last_seen}")
    if person.processed_description:
        print(f"    {_DIM}{person.processed_description}{_RESET}")
    if person.url:
        print(f"    {_CYAN}{person.url}{_RESET}")
    for url in person.alternative_urls or []:
        if url != person.url:
            print(f"    {_CYAN}{url}{_RESET}")
    print()


def _print_pager(page: Page[ProcessedMissingPerson]) -> None:
    """Print the page-number strip with the current page highlighted."""
    if not page.show_controls:
        return
    strip = []
    for number in page.page_numbers:
        if number == GAP:
            strip.append(f"{_DIM}{GAP}{_RESET}")
        elif number == page.page:
            strip.append(f"{_BOLD}[{number}]{_RESET}")
        else:
            strip.append(str(number))
    prev_mark = "<" if page.has_previous else f"{_DIM}<{_RESET}"
    next_mark = ">" if page.has_next else f"{_DIM}>{_RESET}"
    print(f"  {prev_mark} {' '.join(strip)} {next_mark}")


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_page(page: Page[ProcessedMissingPerson], tab: Tab, search_term: str | None) -> None:
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  รายชื่อบุคคลสูญหาย{_RESET}  {_DIM}({tab.value}){_RESET}")
    print(f"{'=' * _WIDTH}")
    if search_term:
        print(f"  พบ {page.total_items} รายการสำหรับ “{search_term}”")
    else:
        print(f"  พบ {page.total_items} รายการทั้งหมด")
    print(f"{'─' * _WIDTH}")

    for person in page.items:
        _print_person(person)

    print(f"{'─' * _WIDTH}")
    _print_pager(page)
    print(f"{'=' * _WIDTH}\n")


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Fetch the feed, build the requested view and print it.

    Returns:
        0 on success, 1 if the upstream data could not be loaded.
    """
    parser = argparse.ArgumentParser(description="Browse missing-person cases.")
    parser.add_argument("search", nargs="?", default=None, help="search term")
    parser.add_argument("--recent", action="store_true", help="only cases last seen this year")
    parser.add_argument("--page", type=int, default=1, help="1-indexed page number")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    settings = load_settings()
    store = MissingPersonsStore(settings=settings)
    pipeline = MissingPersonsPipeline(page_size=settings.page_size)

    print("\n  กำลังโหลดข้อมูล...")
    snapshot = store.refetch()
    if snapshot.error:
        print(f"\n  {_RED}{_BOLD}{snapshot.error}{_RESET}\n")
        return 1

    tab = Tab.RECENT if args.recent else Tab.MISSING
    page = pipeline.browse(snapshot.records, tab=tab, search_term=args.search, page=args.page)
    print_page(page, Tab.SEARCH if args.search and args.search.strip() else tab, args.search)
    print(f"  {_GREEN}อัปเดตล่าสุด {snapshot.last_updated:%Y-%m-%d %H:%M:%S} UTC{_RESET}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
