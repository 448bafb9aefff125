"""Service for parsing the ``datesRange`` query parameter."""

from __future__ import annotations

import json
from datetime import datetime

from dateutil.parser import isoparse

from events_api.domain.models import DateRange, as_utc
from events_api.domain.results import InvalidDate, InvertedRange, MalformedRange


def _parse_date(raw: object) -> datetime:
    if not isinstance(raw, str):
        raise InvalidDate()
    try:
        return as_utc(isoparse(raw.strip()))
    except (ValueError, OverflowError) as exc:
        raise InvalidDate() from exc


def parse_dates_range(raw: str) -> DateRange:
    """Parse a JSON array of two date strings into an ordered ``DateRange``.

    ``'["2024-04-13","2024-04-15"]'`` yields 2024-04-13 .. 2024-04-15. Date-only
    strings and ``YYYY-MM-DD HH:MM:SS`` are accepted; naive values are UTC.

    Raises ``MalformedRange`` if *raw* is not a two-element JSON array,
    ``InvalidDate`` if either element is not a date, and ``InvertedRange`` if
    the first date is after the second.
    """
    try:
        dates = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise MalformedRange() from exc

    if not isinstance(dates, list) or len(dates) != 2:
        raise MalformedRange()

    date_from = _parse_date(dates[0])
    date_to = _parse_date(dates[1])

    if date_from > date_to:
        raise InvertedRange()

    return DateRange(date_from=date_from, date_to=date_to)
