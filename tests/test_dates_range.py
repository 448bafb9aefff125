"""Tests for the datesRange query parser."""

from datetime import datetime, timezone

import pytest

from events_api.domain.models import DateRange
from events_api.domain.results import (
    DateRangeError,
    InvalidDate,
    InvertedRange,
    MalformedRange,
)
from events_api.services.dates_range import parse_dates_range


def test_parses_ordered_dates():
    result = parse_dates_range('["2024-04-13","2024-04-15"]')

    assert result.date_from == datetime(2024, 4, 13, tzinfo=timezone.utc)
    assert result.date_to == datetime(2024, 4, 15, tzinfo=timezone.utc)


def test_accepts_space_separated_date_times():
    result = parse_dates_range('["2024-04-01 00:00:00", "2024-04-30 23:59:59"]')

    assert result.date_from == datetime(2024, 4, 1, tzinfo=timezone.utc)
    assert result.date_to == datetime(2024, 4, 30, 23, 59, 59, tzinfo=timezone.utc)


def test_keeps_explicit_offsets():
    result = parse_dates_range('["2024-04-13T10:00:00+02:00","2024-04-13T12:00:00Z"]')

    assert result.date_from == datetime(2024, 4, 13, 8, tzinfo=timezone.utc)


def test_equal_dates_are_allowed():
    result = parse_dates_range('["2024-04-13","2024-04-13"]')

    assert result.date_from == result.date_to


def test_inverted_range():
    with pytest.raises(InvertedRange) as exc_info:
        parse_dates_range('["2024-04-15","2024-04-13"]')

    assert exc_info.value.message == (
        "Second date element of the array cannot be less then first date element"
    )


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"from": "2024-04-13", "to": "2024-04-10"}',
        '["2024-04-13"]',
        '["2024-04-13", "2024-04-14", "2024-04-15"]',
        '"2024-04-13"',
    ],
)
def test_malformed_range(raw):
    with pytest.raises(MalformedRange):
        parse_dates_range(raw)


@pytest.mark.parametrize(
    "raw",
    [
        '["saldkjf", "asdljskda"]',
        '["2024-04-13", "nope"]',
        '[20240413, "2024-04-14"]',
        '[null, "2024-04-14"]',
    ],
)
def test_invalid_dates(raw):
    with pytest.raises(InvalidDate):
        parse_dates_range(raw)


def test_errors_share_a_base():
    assert issubclass(MalformedRange, DateRangeError)
    assert issubclass(InvalidDate, ValueError)
    assert InvertedRange().error == "Invalid Dates Range"


def test_to_filter_gives_iso_strings():
    date_range = parse_dates_range('["2024-04-13","2024-04-15"]')

    event_filter = date_range.to_filter()

    assert event_filter.date_from == "2024-04-13T00:00:00+00:00"
    assert event_filter.date_to == "2024-04-15T00:00:00+00:00"


def test_returns_date_range_model():
    assert isinstance(parse_dates_range('["2024-04-13","2024-04-15"]'), DateRange)
