"""Service for detecting scheduling conflicts between events."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from events_api.repos.memory import EventRepository, Query


def overlap_query(
    start: datetime, end: datetime, exclude_ids: Iterable[str] = ()
) -> Query:
    """Build the store query matching events that overlap ``[start, end)``.

    Overlap rule: conflict if existing.end > start AND existing.start < end.
    Exact boundary touches (end == start) are NOT considered conflicts.
    Stored zero-length events (start == end) never match.
    """
    return {
        "end": {"$gt": start},
        "start": {"$lt": end},
        "_id": {"$nin": list(exclude_ids)},
        "$expr": {"$lt": ["$start", "$end"]},
    }


def has_overlap(
    repo: EventRepository,
    interval: tuple[datetime, datetime],
    exclude_ids: Iterable[str] = (),
) -> bool:
    """Return True if any stored event, other than *exclude_ids*, overlaps *interval*.

    A zero-length interval overlaps nothing.
    """
    start, end = interval
    if start == end:
        return False
    return repo.count(overlap_query(start, end, exclude_ids)) > 0
