"""Domain models for the calendar events API."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationInfo,
    field_validator,
)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes so stored values stay comparable."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Event(BaseModel):
    """A stored calendar event, serialized as ``{_id, name, allDay, start, end}``."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    all_day: bool = Field(alias="allDay")
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _normalize_dates(cls, value: datetime) -> datetime:
        return as_utc(value)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class DateRange(BaseModel):
    """Ordered pair of timestamps used to filter events by their start.

    Built by ``parse_dates_range``, which rejects inverted pairs.
    """

    date_from: datetime
    date_to: datetime

    def to_filter(self) -> EventFilter:
        return EventFilter(
            date_from=self.date_from.isoformat(),
            date_to=self.date_to.isoformat(),
        )


class EventFilter(BaseModel):
    date_from: str | None = None
    date_to: str | None = None


# ---------------------------------------------------------------------------
# Request DTOs
# ---------------------------------------------------------------------------


def _require_date_string(value: object) -> object:
    """Accept ISO-8601 strings from JSON; numbers are not treated as epoch seconds."""
    if value is None or isinstance(value, (str, datetime)):
        return value
    raise ValueError("must be an ISO-8601 date-time string")


def _check_end(value: datetime | None, info: ValidationInfo) -> datetime | None:
    if value is None:
        return None
    value = as_utc(value)
    start = info.data.get("start")
    if start is not None and value < start:
        raise ValueError("end must not be before start")
    return value


class CreateEventRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    all_day: StrictBool = Field(alias="allDay")
    start: datetime
    end: datetime

    @field_validator("start", "end", mode="before")
    @classmethod
    def _date_strings(cls, value: object) -> object:
        return _require_date_string(value)

    @field_validator("start")
    @classmethod
    def _normalize_start(cls, value: datetime) -> datetime:
        return as_utc(value)

    @field_validator("end")
    @classmethod
    def _end_not_before_start(cls, value: datetime, info: ValidationInfo) -> datetime:
        return _check_end(value, info)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)


class UpdateEventRequest(BaseModel):
    """Partial update: only the fields the client sent are applied."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1)
    all_day: StrictBool | None = Field(default=None, alias="allDay")
    start: datetime | None = None
    end: datetime | None = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def _date_strings(cls, value: object) -> object:
        return _require_date_string(value)

    @field_validator("start")
    @classmethod
    def _normalize_start(cls, value: datetime | None) -> datetime | None:
        return None if value is None else as_utc(value)

    @field_validator("end")
    @classmethod
    def _end_not_before_start(
        cls, value: datetime | None, info: ValidationInfo
    ) -> datetime | None:
        return _check_end(value, info)

    def changes(self) -> dict:
        """Document fields to ``$set``; unset and null fields are left alone."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
