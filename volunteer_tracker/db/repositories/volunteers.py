"""
Volunteer repository functions.

Implements create/read/update for volunteers plus the aggregate queries the
listing and detail endpoints need.
"""
from __future__ import annotations

from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import func

from volunteer_tracker.db import models, schemas


def create_volunteer(db: Session, volunteer: schemas.VolunteerCreate):
    db_volunteer = models.Volunteer(
        name=volunteer.name,
        email=volunteer.email,
        hour_goal=volunteer.hour_goal,
    )
    db.add(db_volunteer)
    db.commit()
    db.refresh(db_volunteer)
    return db_volunteer


def get_volunteer(db: Session, volunteer_id: int):
    return db.query(models.Volunteer).filter(models.Volunteer.id == volunteer_id).first()


def get_volunteer_by_name(db: Session, name: str):
    """Case-insensitive, whitespace-trimmed lookup used by sheet reconciliation."""
    cleaned = (name or "").strip()
    if not cleaned:
        return None
    return (
        db.query(models.Volunteer)
        .filter(func.lower(func.trim(models.Volunteer.name)) == cleaned.lower())
        .order_by(models.Volunteer.id)
        .first()
    )


def get_volunteers(db: Session) -> List[models.Volunteer]:
    return (
        db.query(models.Volunteer)
        .order_by(func.lower(models.Volunteer.name), models.Volunteer.id)
        .all()
    )


def get_volunteers_with_event_counts(db: Session) -> List[Tuple[models.Volunteer, int]]:
    """Return (volunteer, event_count) pairs sorted by name, case-insensitive."""
    counts = (
        db.query(models.Event.volunteer_id, func.count(models.Event.id).label("event_count"))
        .group_by(models.Event.volunteer_id)
        .subquery()
    )
    rows = (
        db.query(models.Volunteer, func.coalesce(counts.c.event_count, 0))
        .outerjoin(counts, counts.c.volunteer_id == models.Volunteer.id)
        .order_by(func.lower(models.Volunteer.name), models.Volunteer.id)
        .all()
    )
    return [(v, int(c)) for v, c in rows]


def update_volunteer(db: Session, volunteer_id: int, volunteer: schemas.VolunteerUpdate) -> Optional[models.Volunteer]:
    db_volunteer = get_volunteer(db, volunteer_id)
    if db_volunteer:
        for key, value in volunteer.model_dump(exclude_unset=True).items():
            if key == "name" and value is None:
                continue
            setattr(db_volunteer, key, value)
        db.commit()
        db.refresh(db_volunteer)
    return db_volunteer
