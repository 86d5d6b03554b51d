"""
Admin API endpoints.

Every route except `/verify` requires the admin password header. Spreadsheet
sync endpoints also depend on the sheets sync feature flag.
"""
import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from volunteer_tracker import audit
from volunteer_tracker.api.deps import check_admin_password, require_admin, require_sheets_sync, set_admin_password
from volunteer_tracker.db import schemas
from volunteer_tracker.db.database import get_db
from volunteer_tracker.db.repositories import audits as audit_repo
from volunteer_tracker.db.repositories import settings as settings_repo
from volunteer_tracker.services import csv_export, sheets_sync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/verify")
def verify_admin_endpoint(payload: schemas.AdminVerifyRequest, db: Session = Depends(get_db)):
    if not check_admin_password(db, payload.password):
        audit.try_log(
            db, action=audit.AuditAction.ADMIN_VERIFY, status=audit.AuditStatus.FAILURE, actor=audit.ACTOR_CLIENT
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin password")
    audit.try_log(db, action=audit.AuditAction.ADMIN_VERIFY, actor=audit.ACTOR_ADMIN)
    return {"verified": True}


@router.post("/password", dependencies=[Depends(require_admin)])
def change_password_endpoint(payload: schemas.PasswordChange, db: Session = Depends(get_db)):
    if not check_admin_password(db, payload.current_password):
        audit.try_log(
            db,
            action=audit.AuditAction.PASSWORD_CHANGE,
            status=audit.AuditStatus.FAILURE,
            actor=audit.ACTOR_ADMIN,
            reason="current password mismatch",
        )
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")
    set_admin_password(db, payload.new_password)
    logger.info("admin_password_changed")
    audit.try_log(db, action=audit.AuditAction.PASSWORD_CHANGE, actor=audit.ACTOR_ADMIN)
    return {"message": "Password changed successfully"}


def _sheets_config_view(db: Session) -> schemas.GoogleSheetsConfigView:
    config = sheets_sync.load_sheets_settings(db)
    return schemas.GoogleSheetsConfigView(
        sheet_id=settings_repo.get_setting(db, settings_repo.SHEETS_SHEET_ID),
        client_email=config.client_email if config else None,
        service_account_configured=config is not None,
        last_sync_timestamp=settings_repo.get_setting(db, settings_repo.LAST_SYNC_TIME),
        last_pull_timestamp=settings_repo.get_setting(db, settings_repo.LAST_PULL_TIME),
        auto_sync_enabled=settings_repo.get_bool_setting(db, settings_repo.AUTO_SYNC_ENABLED),
    )


@router.get("/sheets-config", response_model=schemas.GoogleSheetsConfigView, dependencies=[Depends(require_admin)])
def get_sheets_config_endpoint(db: Session = Depends(get_db)):
    return _sheets_config_view(db)


@router.post("/sheets-config", response_model=schemas.GoogleSheetsConfigView, dependencies=[Depends(require_admin)])
def save_sheets_config_endpoint(payload: schemas.GoogleSheetsConfig, db: Session = Depends(get_db)):
    settings_repo.update_setting(db, settings_repo.SHEETS_SHEET_ID, payload.sheet_id)
    settings_repo.update_setting(db, settings_repo.SHEETS_SERVICE_ACCOUNT, payload.service_account)
    client_email = json.loads(payload.service_account).get("client_email")
    logger.info("sheets_config_saved sheet_id=%s client_email=%s", payload.sheet_id, client_email)
    audit.try_log(
        db,
        action=audit.AuditAction.SHEETS_CONFIG_UPDATE,
        target_type="spreadsheet",
        target_id=payload.sheet_id,
        actor=audit.ACTOR_ADMIN,
        metadata={"client_email": client_email},
    )
    return _sheets_config_view(db)


@router.get("/export-csv", dependencies=[Depends(require_admin)])
def export_csv_endpoint(db: Session = Depends(get_db)):
    content = csv_export.export_csv(db)
    audit.try_log(db, action=audit.AuditAction.CSV_EXPORT, actor=audit.ACTOR_ADMIN)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={csv_export.CSV_FILENAME}"},
    )


@router.get("/audits", response_model=List[schemas.AuditLog], dependencies=[Depends(require_admin)])
def list_audit_logs_endpoint(
    action_type: Optional[str] = None,
    status_filter: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    logs = audit_repo.get_audit_logs(db, action_type=action_type, status=status_filter, skip=skip, limit=limit)
    return [
        schemas.AuditLog(
            id=log.id,
            actor=log.actor,
            action_type=log.action_type,
            status=log.status,
            target_type=log.target_type,
            target_id=log.target_id,
            reason=log.reason,
            metadata=log.metadata_json,
            created_at=log.created_at,
        )
        for log in logs
    ]


def _run_sync(runner, db: Session):
    try:
        return runner(db, actor=audit.ACTOR_ADMIN)
    except sheets_sync.SheetsNotConfigured as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except sheets_sync.SheetsSyncError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))


@router.post(
    "/sync-sheets",
    response_model=schemas.SyncReport,
    dependencies=[Depends(require_sheets_sync), Depends(require_admin)],
)
def push_sheets_endpoint(db: Session = Depends(get_db)):
    return _run_sync(sheets_sync.run_push, db)


@router.post(
    "/pull-sheets",
    response_model=schemas.SyncReport,
    dependencies=[Depends(require_sheets_sync), Depends(require_admin)],
)
def pull_sheets_endpoint(db: Session = Depends(get_db)):
    return _run_sync(sheets_sync.run_pull, db)


@router.post(
    "/sync-sheets/two-way",
    response_model=schemas.TwoWaySyncReport,
    dependencies=[Depends(require_sheets_sync), Depends(require_admin)],
)
def two_way_sync_endpoint(db: Session = Depends(get_db)):
    return _run_sync(sheets_sync.run_two_way, db)
