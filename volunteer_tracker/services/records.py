"""
Volunteer and event operations shared by the HTTP routers and offline replay.

Functions raise `RecordError` subclasses carrying the HTTP status the caller
should answer with; routers translate them into `HTTPException`.
"""
from __future__ import annotations

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from volunteer_tracker import audit
from volunteer_tracker.db import models, schemas
from volunteer_tracker.db.repositories import events as event_repo
from volunteer_tracker.db.repositories import volunteers as volunteer_repo
from volunteer_tracker.utils.hours import progress_percentage, sum_hours

logger = logging.getLogger(__name__)


class RecordError(Exception):
    status_code = 400

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(RecordError):
    status_code = 404


def _require_volunteer(db: Session, volunteer_id: int) -> models.Volunteer:
    db_volunteer = volunteer_repo.get_volunteer(db, volunteer_id)
    if db_volunteer is None:
        raise NotFoundError("Volunteer not found")
    return db_volunteer


def list_volunteers(db: Session) -> List[schemas.VolunteerWithCount]:
    return [
        schemas.VolunteerWithCount(
            id=v.id, name=v.name, email=v.email, hour_goal=v.hour_goal, event_count=count
        )
        for v, count in volunteer_repo.get_volunteers_with_event_counts(db)
    ]


def volunteer_stats(db_volunteer: models.Volunteer, db_events: List[models.Event]) -> schemas.VolunteerStats:
    total = sum_hours(e.hours for e in db_events)
    return schemas.VolunteerStats(
        total_events=len(db_events),
        total_hours=total,
        progress_percentage=progress_percentage(total, db_volunteer.hour_goal),
        hour_goal=db_volunteer.hour_goal,
    )


def volunteer_details(db: Session, volunteer_id: int) -> schemas.VolunteerDetails:
    db_volunteer = _require_volunteer(db, volunteer_id)
    db_events = event_repo.get_events_by_volunteer(db, volunteer_id)
    return schemas.VolunteerDetails(
        volunteer=schemas.Volunteer.model_validate(db_volunteer),
        events=[schemas.Event.model_validate(e) for e in db_events],
        stats=volunteer_stats(db_volunteer, db_events),
    )


def create_volunteer(db: Session, payload: schemas.VolunteerCreate, actor: str = audit.ACTOR_CLIENT) -> models.Volunteer:
    db_volunteer = volunteer_repo.create_volunteer(db, payload)
    logger.info("volunteer_created id=%s", db_volunteer.id)
    audit.log_volunteer(
        db, volunteer_id=db_volunteer.id, action=audit.AuditAction.VOLUNTEER_CREATE, actor=actor, name=db_volunteer.name
    )
    return db_volunteer


def update_volunteer(
    db: Session, volunteer_id: int, payload: schemas.VolunteerUpdate, actor: str = audit.ACTOR_ADMIN
) -> models.Volunteer:
    db_volunteer = volunteer_repo.update_volunteer(db, volunteer_id, payload)
    if db_volunteer is None:
        raise NotFoundError("Volunteer not found")
    audit.log_volunteer(
        db, volunteer_id=volunteer_id, action=audit.AuditAction.VOLUNTEER_UPDATE, actor=actor, name=db_volunteer.name
    )
    return db_volunteer


def create_event(db: Session, payload: schemas.EventCreate, actor: str = audit.ACTOR_CLIENT) -> models.Event:
    _require_volunteer(db, payload.volunteer_id)
    db_event = event_repo.create_event(db, payload)
    logger.info("event_created id=%s volunteer_id=%s", db_event.id, db_event.volunteer_id)
    audit.log_event(
        db,
        event_id=db_event.id,
        action=audit.AuditAction.EVENT_CREATE,
        actor=actor,
        metadata={"volunteer_id": db_event.volunteer_id},
    )
    return db_event


def update_event(
    db: Session, event_id: int, payload: schemas.EventCreate, actor: str = audit.ACTOR_CLIENT
) -> models.Event:
    if event_repo.get_event(db, event_id) is None:
        raise NotFoundError("Event not found")
    _require_volunteer(db, payload.volunteer_id)
    db_event = event_repo.update_event(db, event_id, payload)
    audit.log_event(
        db,
        event_id=event_id,
        action=audit.AuditAction.EVENT_UPDATE,
        actor=actor,
        metadata={"volunteer_id": db_event.volunteer_id},
    )
    return db_event


def update_event_hours(
    db: Session, db_event: models.Event, hours: str, actor: str = audit.ACTOR_SYSTEM
) -> models.Event:
    previous = db_event.hours
    db_event = event_repo.update_event_hours(db, db_event, hours)
    audit.log_event(
        db,
        event_id=db_event.id,
        action=audit.AuditAction.EVENT_UPDATE,
        actor=actor,
        metadata={"volunteer_id": db_event.volunteer_id, "hours_before": previous, "hours_after": hours},
    )
    return db_event


def delete_event(db: Session, event_id: int, actor: str = audit.ACTOR_ADMIN) -> None:
    if not event_repo.delete_event(db, event_id):
        raise NotFoundError("Event not found")
    logger.info("event_deleted id=%s", event_id)
    audit.log_event(db, event_id=event_id, action=audit.AuditAction.EVENT_DELETE, actor=actor)


def events_by_volunteer(db: Session) -> Dict[int, List[models.Event]]:
    """Group all events by volunteer id, each list newest date first."""
    grouped: Dict[int, List[models.Event]] = {}
    for db_event in event_repo.get_events(db):
        grouped.setdefault(db_event.volunteer_id, []).append(db_event)
    return grouped
