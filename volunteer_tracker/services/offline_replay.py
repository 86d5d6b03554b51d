"""
Server-side replay of writes queued by an offline client.

Each operation mirrors the HTTP request the client would have sent. Outcomes
are stored in the replay ledger keyed by the client's operation id, so a
batch that is resent after a lost response is answered from the ledger
instead of being applied twice.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import urlsplit

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from volunteer_tracker import audit
from volunteer_tracker.db import schemas
from volunteer_tracker.db.repositories import replay as replay_repo
from volunteer_tracker.services import records

logger = logging.getLogger(__name__)

APPLIED = "applied"
DUPLICATE = "duplicate"
NOOP = "noop"
FAILED = "failed"

VOLUNTEERS = "volunteers"
EVENTS = "events"


@dataclass(frozen=True)
class _Route:
    method: str
    pattern: "re.Pattern[str]"
    handler: str
    requires_admin: bool
    creates: Optional[str] = None


ROUTES: Sequence[_Route] = (
    _Route("POST", re.compile(r"^/api/volunteers/?$"), "create_volunteer", False, creates=VOLUNTEERS),
    _Route("PATCH", re.compile(r"^/api/volunteers/(-?\d+)/?$"), "update_volunteer", True),
    _Route("POST", re.compile(r"^/api/events/?$"), "create_event", False, creates=EVENTS),
    _Route("PUT", re.compile(r"^/api/events/(-?\d+)/?$"), "update_event", False),
    _Route("DELETE", re.compile(r"^/api/events/(-?\d+)/?$"), "delete_event", True),
)


class _Outcome(Exception):
    """Terminal result for an operation that did not apply."""

    def __init__(self, status: str, http_status: int, error: Optional[str] = None, data: Any = None):
        super().__init__(error or status)
        self.status = status
        self.http_status = http_status
        self.error = error
        self.data = data


def match_route(method: str, url: str):
    """Return ``(route, path_id)`` for a supported operation, else ``(None, None)``."""
    path = urlsplit(url or "").path
    for route in ROUTES:
        if route.method != method:
            continue
        match = route.pattern.match(path)
        if match:
            return route, int(match.group(1)) if match.groups() else None
    return None, None


def _sort_key(item):
    index, op = item
    if op.queued_at is None:
        return (1, datetime.min.replace(tzinfo=timezone.utc), index)
    queued = op.queued_at
    if queued.tzinfo is None:
        queued = queued.replace(tzinfo=timezone.utc)
    return (0, queued.astimezone(timezone.utc), index)


def order_operations(operations: Sequence[schemas.ReplayOperation]) -> List[schemas.ReplayOperation]:
    """Queue order: timestamped operations by time, then the rest as submitted."""
    return [op for _, op in sorted(enumerate(operations), key=_sort_key)]


class ReplaySession:
    """Applies one batch of operations against a database session."""

    def __init__(self, db: Session, *, is_admin: bool):
        self.db = db
        self.is_admin = is_admin
        self.id_map: Dict[str, Dict[str, int]] = {VOLUNTEERS: {}, EVENTS: {}}
        self._handlers: Dict[str, Callable[[schemas.ReplayOperation, Optional[int]], tuple]] = {
            "create_volunteer": self._create_volunteer,
            "update_volunteer": self._update_volunteer,
            "create_event": self._create_event,
            "update_event": self._update_event,
            "delete_event": self._delete_event,
        }

    @property
    def actor(self) -> str:
        return audit.ACTOR_ADMIN if self.is_admin else audit.ACTOR_CLIENT

    def _real_id(self, kind: str, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        return self.id_map[kind].get(str(value), value)

    def _remember(self, kind: Optional[str], temp_id: Optional[int], real_id: Optional[int]) -> None:
        if kind and temp_id is not None and real_id is not None:
            self.id_map[kind][str(temp_id)] = real_id

    def _body(self, op: schemas.ReplayOperation) -> Dict[str, Any]:
        body = dict(op.body or {})
        for key in ("volunteerId", "volunteer_id"):
            value = body.get(key)
            if isinstance(value, int) or (isinstance(value, str) and value.lstrip("-").isdigit()):
                body[key] = self._real_id(VOLUNTEERS, int(value))
        return body

    def _create_volunteer(self, op, _path_id):
        payload = schemas.VolunteerCreate.model_validate(self._body(op))
        db_volunteer = records.create_volunteer(self.db, payload, actor=self.actor)
        return 201, schemas.Volunteer.model_validate(db_volunteer).model_dump(by_alias=True), db_volunteer.id

    def _update_volunteer(self, op, path_id):
        payload = schemas.VolunteerUpdate.model_validate(self._body(op))
        volunteer_id = self._real_id(VOLUNTEERS, path_id)
        db_volunteer = records.update_volunteer(self.db, volunteer_id, payload, actor=self.actor)
        return 200, schemas.Volunteer.model_validate(db_volunteer).model_dump(by_alias=True), db_volunteer.id

    def _create_event(self, op, _path_id):
        payload = schemas.EventCreate.model_validate(self._body(op))
        db_event = records.create_event(self.db, payload, actor=self.actor)
        return 201, schemas.Event.model_validate(db_event).model_dump(by_alias=True), db_event.id

    def _update_event(self, op, path_id):
        payload = schemas.EventCreate.model_validate(self._body(op))
        event_id = self._real_id(EVENTS, path_id)
        db_event = records.update_event(self.db, event_id, payload, actor=self.actor)
        return 200, schemas.Event.model_validate(db_event).model_dump(by_alias=True), db_event.id

    def _delete_event(self, op, path_id):
        event_id = self._real_id(EVENTS, path_id)
        try:
            records.delete_event(self.db, event_id, actor=self.actor)
        except records.NotFoundError:
            raise _Outcome(NOOP, 200, data={"message": "Event already deleted"})
        return 200, {"message": "Event deleted successfully"}, event_id

    def _apply(self, op: schemas.ReplayOperation):
        route, path_id = match_route(op.method, op.url)
        if route is None:
            raise _Outcome(FAILED, 404, "API endpoint not found")
        if route.requires_admin and not self.is_admin:
            raise _Outcome(FAILED, 401, "Invalid admin password")
        try:
            http_status, data, result_id = self._handlers[route.handler](op, path_id)
        except ValidationError as exc:
            raise _Outcome(FAILED, 422, "; ".join(e.get("msg", "").removeprefix("Value error, ") for e in exc.errors()))
        except records.RecordError as exc:
            raise _Outcome(FAILED, exc.status_code, exc.detail)
        self._remember(route.creates, op.temp_id, result_id)
        return http_status, data, result_id

    def _record(self, op, status, http_status, data, error, result_id=None) -> None:
        try:
            replay_repo.record_replayed_operation(
                self.db,
                operation_id=op.id,
                operation_type=op.type,
                method=op.method,
                url=op.url,
                status=status,
                http_status=http_status,
                result_id=result_id,
                response={"data": data, "error": error},
            )
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("replay_ledger_write_failed id=%s error=%s", op.id, exc)

    def _duplicate(self, op, ledger) -> schemas.ReplayResult:
        route, _ = match_route(op.method, op.url)
        if route is not None:
            self._remember(route.creates, op.temp_id, ledger.result_id)
        stored = ledger.response or {}
        return schemas.ReplayResult(
            id=op.id,
            status=DUPLICATE,
            http_status=ledger.http_status,
            data=stored.get("data"),
            error=stored.get("error"),
        )

    def replay_one(self, op: schemas.ReplayOperation) -> schemas.ReplayResult:
        ledger = replay_repo.get_replayed_operation(self.db, op.id)
        if ledger is not None:
            return self._duplicate(op, ledger)
        try:
            http_status, data, result_id = self._apply(op)
        except _Outcome as outcome:
            if outcome.http_status != 401:
                self._record(op, outcome.status, outcome.http_status, outcome.data, outcome.error)
            return schemas.ReplayResult(
                id=op.id, status=outcome.status, http_status=outcome.http_status, data=outcome.data, error=outcome.error
            )
        except (SQLAlchemyError, RuntimeError) as exc:
            self.db.rollback()
            logger.error("replay_operation_failed id=%s error=%s", op.id, exc)
            self._record(op, FAILED, 500, None, "Database error")
            return schemas.ReplayResult(id=op.id, status=FAILED, http_status=500, error="Database error")
        self._record(op, APPLIED, http_status, data, None, result_id)
        return schemas.ReplayResult(id=op.id, status=APPLIED, http_status=http_status, data=data)


def replay_operations(
    db: Session, operations: Sequence[schemas.ReplayOperation], *, is_admin: bool = False
) -> schemas.ReplayResponse:
    """Apply queued operations in queue order; one failure never stops the batch."""
    session = ReplaySession(db, is_admin=is_admin)
    results = [session.replay_one(op) for op in order_operations(operations)]

    counts: Dict[str, int] = {}
    for result in results:
        counts[result.status] = counts.get(result.status, 0) + 1
    logger.info("offline_replay_batch operations=%d outcomes=%s", len(results), counts)
    audit.try_log(
        db,
        action=audit.AuditAction.OFFLINE_REPLAY,
        status=audit.AuditStatus.FAILURE if counts.get(FAILED) else audit.AuditStatus.SUCCESS,
        target_type="replay_batch",
        actor=session.actor,
        metadata={"operations": len(results), "outcomes": counts},
    )
    return schemas.ReplayResponse(results=results, id_map=session.id_map)


def any_applied(response: schemas.ReplayResponse) -> bool:
    return any(r.status == APPLIED for r in response.results)
