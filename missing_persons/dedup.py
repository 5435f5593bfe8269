"""
Merge feed records that describe the same case.

The same case is often reported by more than one platform, each with its own
source URL. Records are grouped by case identifier; the first record of each
group is kept and every source URL of the group is attached to it.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import MissingPerson


def case_key(person: MissingPerson) -> str:
    """Grouping key: the case identifier as a string, '' when missing."""
    return "" if person.case_id is None else str(person.case_id)


def deduplicate(records: Iterable[MissingPerson | None] | None) -> list[MissingPerson]:
    """Return one record per case identifier, in order of first appearance.

    None entries are skipped. For a group with more than one record the
    kept copy gets `alternative_urls`: every member's source URL, blanks
    dropped. Single-record groups are copied unchanged, so running this on
    its own output is a no-op.
    """
    if not records:
        return []

    groups: dict[str, list[MissingPerson]] = {}
    for person in records:
        if person is None:
            continue
        groups.setdefault(case_key(person), []).append(person)

    merged: list[MissingPerson] = []
    for group in groups.values():
        base = group[0]
        if len(group) > 1:
            urls = [p.url for p in group if p.url]
            merged.append(base.model_copy(update={"alternative_urls": urls}))
        else:
            merged.append(base.model_copy())
    return merged
