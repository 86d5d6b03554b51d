"""
Event repository functions.

Events are ordered newest date first; ties fall back to the most recently
created record.
"""
from __future__ import annotations

from typing import List, Optional
from sqlalchemy.orm import Session

from volunteer_tracker.db import models, schemas


def _ordered(query):
    return query.order_by(models.Event.date.desc(), models.Event.id.desc())


def create_event(db: Session, event: schemas.EventCreate):
    db_event = models.Event(**event.model_dump())
    db.add(db_event)
    db.commit()
    db.refresh(db_event)
    return db_event


def get_event(db: Session, event_id: int):
    return db.query(models.Event).filter(models.Event.id == event_id).first()


def get_events(db: Session) -> List[models.Event]:
    return _ordered(db.query(models.Event)).all()


def get_events_by_volunteer(db: Session, volunteer_id: int) -> List[models.Event]:
    return _ordered(db.query(models.Event).filter(models.Event.volunteer_id == volunteer_id)).all()


def update_event(db: Session, event_id: int, event: schemas.EventCreate) -> Optional[models.Event]:
    db_event = get_event(db, event_id)
    if db_event:
        for key, value in event.model_dump().items():
            setattr(db_event, key, value)
        db.commit()
        db.refresh(db_event)
    return db_event


def update_event_hours(db: Session, db_event: models.Event, hours: str) -> models.Event:
    db_event.hours = hours
    db.commit()
    db.refresh(db_event)
    return db_event


def delete_event(db: Session, event_id: int) -> bool:
    """Delete an event; returns False when it does not exist."""
    db_event = get_event(db, event_id)
    if not db_event:
        return False
    try:
        db.delete(db_event)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete event {event_id}: {str(e)}")
