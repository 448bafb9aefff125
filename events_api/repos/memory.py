"""In-memory document store for events."""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Iterator, Mapping

from dateutil.parser import isoparse

from events_api.domain.models import Event, as_utc

logger = logging.getLogger(__name__)

Query = Mapping[str, Any]


class RepositoryClosedError(RuntimeError):
    """Raised when a repository is used after ``close()``."""


def _coerce(value: Any, operand: Any) -> Any:
    """Compare datetimes with datetimes even when the query carries ISO strings."""
    if isinstance(value, datetime) and isinstance(operand, str):
        return as_utc(isoparse(operand))
    if isinstance(operand, datetime):
        return as_utc(operand)
    return operand


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": lambda value, operand: value == operand,
    "$ne": lambda value, operand: value != operand,
    "$gt": lambda value, operand: value is not None and value > operand,
    "$gte": lambda value, operand: value is not None and value >= operand,
    "$lt": lambda value, operand: value is not None and value < operand,
    "$lte": lambda value, operand: value is not None and value <= operand,
    "$in": lambda value, operand: value in operand,
    "$nin": lambda value, operand: value not in operand,
}


def _match_clause(value: Any, condition: Any) -> bool:
    if not isinstance(condition, Mapping):
        return value == _coerce(value, condition)
    for op, operand in condition.items():
        check = _OPERATORS.get(op)
        if check is None:
            raise ValueError(f"Unsupported query operator: {op}")
        if op in ("$in", "$nin"):
            operand = [_coerce(value, item) for item in operand]
        else:
            operand = _coerce(value, operand)
        if not check(value, operand):
            return False
    return True


def _match_expr(document: Mapping[str, Any], expr: Mapping[str, Any]) -> bool:
    """Compare document fields with each other, e.g. ``{"$lt": ["$start", "$end"]}``."""

    def resolve(operand: Any) -> Any:
        if isinstance(operand, str) and operand.startswith("$"):
            return document.get(operand[1:])
        return operand

    for op, (left, right) in expr.items():
        check = _OPERATORS.get(op)
        if check is None or op in ("$in", "$nin"):
            raise ValueError(f"Unsupported $expr operator: {op}")
        if not check(resolve(left), resolve(right)):
            return False
    return True


def matches(document: Mapping[str, Any], query: Query | None) -> bool:
    """Return True if *document* satisfies every clause of *query*.

    Clauses map a field to a literal (equality) or to an operator mapping
    such as ``{"$gt": x, "$lte": y}``. An ``$expr`` clause compares two
    fields of the same document. All clauses must hold.
    """
    if not query:
        return True
    return all(
        _match_expr(document, condition)
        if field == "$expr"
        else _match_clause(document.get(field), condition)
        for field, condition in query.items()
    )


class EventRepository:
    """Dict-backed store for event documents, keyed by ``_id`` in insertion order."""

    def __init__(self, name: str = "events") -> None:
        self.name = name
        self._store: dict[str, dict] = {}
        self._lock = threading.RLock()
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._closed = True
        self._store.clear()
        logger.info("Closed event store %r", self.name)

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise RepositoryClosedError(f"Event store {self.name!r} is closed")

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        """Serialize a check-then-write sequence against other writers."""
        with self._lock:
            yield

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def insert(self, document: Mapping[str, Any]) -> Event:
        self._check_open()
        event = Event.model_validate({**document, "_id": uuid.uuid4().hex})
        with self._lock:
            self._store[event.id] = event.to_document()
        return event

    def get(self, event_id: str) -> Event | None:
        self._check_open()
        document = self._store.get(event_id)
        return None if document is None else Event.model_validate(document)

    def find(self, query: Query | None = None) -> list[Event]:
        self._check_open()
        documents = list(self._store.values())
        return [Event.model_validate(d) for d in documents if matches(d, query)]

    def count(self, query: Query | None = None) -> int:
        self._check_open()
        return sum(1 for d in list(self._store.values()) if matches(d, query))

    def update(self, event_id: str, fields: Mapping[str, Any]) -> bool:
        """Set only the given fields on a stored document (``$set`` semantics)."""
        self._check_open()
        with self._lock:
            document = self._store.get(event_id)
            if document is None:
                return False
            updated = {**copy.deepcopy(document), **fields, "_id": event_id}
            self._store[event_id] = Event.model_validate(updated).to_document()
        return True

    def delete(self, event_id: str) -> Event | None:
        self._check_open()
        with self._lock:
            document = self._store.pop(event_id, None)
        return None if document is None else Event.model_validate(document)
