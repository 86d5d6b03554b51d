"""
Event API endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from volunteer_tracker import audit
from volunteer_tracker.api.deps import require_admin
from volunteer_tracker.db import schemas
from volunteer_tracker.db.database import get_db
from volunteer_tracker.db.repositories import events as event_repo
from volunteer_tracker.services import records
from volunteer_tracker.services.auto_sync import request_auto_sync

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=List[schemas.Event])
def list_events_endpoint(db: Session = Depends(get_db)):
    return event_repo.get_events(db)


@router.post("", response_model=schemas.Event, status_code=status.HTTP_201_CREATED)
def create_event_endpoint(event: schemas.EventCreate, db: Session = Depends(get_db)):
    try:
        created = records.create_event(db, event)
    except records.RecordError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    request_auto_sync()
    return created


@router.put("/{event_id}", response_model=schemas.Event)
def update_event_endpoint(event_id: int, event: schemas.EventCreate, db: Session = Depends(get_db)):
    try:
        updated = records.update_event(db, event_id, event)
    except records.RecordError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    request_auto_sync()
    return updated


@router.delete("/{event_id}", dependencies=[Depends(require_admin)])
def delete_event_endpoint(event_id: int, db: Session = Depends(get_db)):
    try:
        records.delete_event(db, event_id, actor=audit.ACTOR_ADMIN)
    except records.RecordError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
    request_auto_sync()
    return {"message": "Event deleted successfully"}
