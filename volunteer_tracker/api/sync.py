"""
Sync status, auto-sync toggle and offline replay endpoints.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from volunteer_tracker import audit
from volunteer_tracker.api.deps import is_admin_request, require_admin, require_offline_replay
from volunteer_tracker.db import schemas
from volunteer_tracker.db.database import get_db
from volunteer_tracker.db.repositories import settings as settings_repo
from volunteer_tracker.services import offline_replay, sheets_sync
from volunteer_tracker.services.auto_sync import request_auto_sync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sync", tags=["sync"])


@router.get("/status", response_model=schemas.SyncStatus)
def sync_status_endpoint(db: Session = Depends(get_db)):
    return schemas.SyncStatus(
        last_sync_time=settings_repo.get_setting(db, settings_repo.LAST_SYNC_TIME),
        last_pull_time=settings_repo.get_setting(db, settings_repo.LAST_PULL_TIME),
        auto_sync_enabled=settings_repo.get_bool_setting(db, settings_repo.AUTO_SYNC_ENABLED),
        sheets_configured=sheets_sync.sheets_configured(db),
    )


@router.post("/auto-toggle", response_model=schemas.AutoSyncToggleResult, dependencies=[Depends(require_admin)])
def auto_toggle_endpoint(payload: schemas.AutoSyncToggle, db: Session = Depends(get_db)):
    settings_repo.set_bool_setting(db, settings_repo.AUTO_SYNC_ENABLED, payload.enabled)
    logger.info("auto_sync_toggled enabled=%s", payload.enabled)
    audit.try_log(
        db,
        action=audit.AuditAction.AUTO_SYNC_TOGGLE,
        actor=audit.ACTOR_ADMIN,
        metadata={"enabled": payload.enabled},
    )
    return schemas.AutoSyncToggleResult(
        message=f"Auto-sync {'enabled' if payload.enabled else 'disabled'}",
        auto_sync_enabled=payload.enabled,
    )


@router.post("/replay", response_model=schemas.ReplayResponse, dependencies=[Depends(require_offline_replay)])
def replay_endpoint(
    payload: schemas.ReplayRequest,
    db: Session = Depends(get_db),
    is_admin: bool = Depends(is_admin_request),
):
    response = offline_replay.replay_operations(db, payload.operations, is_admin=is_admin)
    if offline_replay.any_applied(response):
        request_auto_sync()
    return response
