"""Service orchestrating event CRUD under the no-overlap rule."""

from __future__ import annotations

import logging

from events_api.domain.models import (
    CreateEventRequest,
    Event,
    EventFilter,
    UpdateEventRequest,
)
from events_api.domain.results import (
    EventResult,
    LookupResult,
    NotFound,
    OverlapConflict,
)
from events_api.repos.memory import EventRepository
from events_api.services.conflicts import has_overlap

logger = logging.getLogger(__name__)


class EventService:
    """Create, read, update and delete events without letting intervals overlap.

    Failures come back as ``NotFound`` / ``OverlapConflict`` values rather than
    exceptions; translating them is left to the HTTP layer.
    """

    def __init__(self, repo: EventRepository) -> None:
        self.repo = repo

    def create(self, request: CreateEventRequest) -> Event | OverlapConflict:
        with self.repo.write_lock():
            if has_overlap(self.repo, (request.start, request.end)):
                logger.info(
                    "Rejected event %r: overlaps %s - %s",
                    request.name,
                    request.start.isoformat(),
                    request.end.isoformat(),
                )
                return OverlapConflict(action="create")

            event = self.repo.insert(request.to_document())

        logger.info("Created event %s (%r)", event.id, event.name)
        return event

    def find_all(self, filter: EventFilter | None = None) -> list[Event]:
        query = {}
        if filter is not None and filter.date_from and filter.date_to:
            query["start"] = {"$gte": filter.date_from, "$lte": filter.date_to}
        return self.repo.find(query)

    def find_one(self, event_id: str) -> LookupResult:
        event = self.repo.get(event_id)
        if event is None:
            return NotFound(event_id=event_id)
        return event

    def update(self, event_id: str, request: UpdateEventRequest) -> EventResult:
        with self.repo.write_lock():
            current = self.repo.get(event_id)
            if current is None:
                return NotFound(event_id=event_id)

            start = request.start if request.start is not None else current.start
            end = request.end if request.end is not None else current.end

            if has_overlap(self.repo, (start, end), exclude_ids=[event_id]):
                logger.info(
                    "Rejected update of event %s: overlaps %s - %s",
                    event_id,
                    start.isoformat(),
                    end.isoformat(),
                )
                return OverlapConflict(action="update")

            changes = request.changes()
            if changes:
                self.repo.update(event_id, changes)

            # Re-read so callers always see what the store holds.
            updated = self.repo.get(event_id)

        if updated is None:
            return NotFound(event_id=event_id)
        logger.info("Updated event %s fields=%s", event_id, sorted(changes))
        return updated

    def remove(self, event_id: str) -> LookupResult:
        with self.repo.write_lock():
            event = self.repo.delete(event_id)
        if event is None:
            return NotFound(event_id=event_id)
        logger.info("Deleted event %s", event_id)
        return event
