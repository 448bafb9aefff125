"""Outcomes and errors returned by the events service and the date-range parser."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel

from events_api.domain.models import Event


class NotFound(BaseModel):
    """No event is stored under ``event_id``."""

    event_id: str
    message: str = "Document not found"


class OverlapConflict(BaseModel):
    """The requested interval overlaps another stored event."""

    action: Literal["create", "update"]
    error: str = "EventOverlapError"

    @property
    def message(self) -> str:
        return (
            f"Cannot {self.action} event, other overlapping events detected. "
            "Please choose another date slot."
        )


EventResult = Union[Event, NotFound, OverlapConflict]
LookupResult = Union[Event, NotFound]


# ---------------------------------------------------------------------------
# datesRange query errors
# ---------------------------------------------------------------------------


class DateRangeError(ValueError):
    error = "Invalid Dates Range"
    message = "Invalid dates range."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class MalformedRange(DateRangeError):
    message = "datesRange query should be a valid json array."


class InvalidDate(DateRangeError):
    message = "Invalid dates given."


class InvertedRange(DateRangeError):
    message = "Second date element of the array cannot be less then first date element"
