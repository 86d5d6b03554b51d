"""
Volunteer API endpoints.

Listing and detail are public; creation is open to the client, while edits
require the admin password.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from volunteer_tracker import audit
from volunteer_tracker.api.deps import require_admin
from volunteer_tracker.db import schemas
from volunteer_tracker.db.database import get_db
from volunteer_tracker.services import records
from volunteer_tracker.services.auto_sync import request_auto_sync

router = APIRouter(prefix="/api/volunteers", tags=["volunteers"])


@router.get("", response_model=List[schemas.VolunteerWithCount])
def list_volunteers_endpoint(db: Session = Depends(get_db)):
    return records.list_volunteers(db)


@router.get("/{volunteer_id}", response_model=schemas.VolunteerDetails)
def get_volunteer_endpoint(volunteer_id: int, db: Session = Depends(get_db)):
    try:
        return records.volunteer_details(db, volunteer_id)
    except records.RecordError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)


@router.post("", response_model=schemas.Volunteer, status_code=status.HTTP_201_CREATED)
def create_volunteer_endpoint(volunteer: schemas.VolunteerCreate, db: Session = Depends(get_db)):
    created = records.create_volunteer(db, volunteer)
    request_auto_sync()
    return created


@router.patch("/{volunteer_id}", response_model=schemas.Volunteer, dependencies=[Depends(require_admin)])
def update_volunteer_endpoint(
    volunteer_id: int,
    volunteer: schemas.VolunteerUpdate,
    db: Session = Depends(get_db),
):
    try:
        updated = records.update_volunteer(db, volunteer_id, volunteer, actor=audit.ACTOR_ADMIN)
    except records.RecordError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail)
    request_auto_sync()
    return updated
