"""
Audit logging helpers and enums.

Centralized helpers to persist normalized audit records with consistent
schema; includes convenience wrappers per target type.
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Any, Optional, Dict
from sqlalchemy.orm import Session

from volunteer_tracker.db import schemas
from volunteer_tracker.db.repositories import audits as audit_repo

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    # Volunteers
    VOLUNTEER_CREATE = "volunteer_create"
    VOLUNTEER_UPDATE = "volunteer_update"
    # Events
    EVENT_CREATE = "event_create"
    EVENT_UPDATE = "event_update"
    EVENT_DELETE = "event_delete"
    # Admin
    ADMIN_VERIFY = "admin_verify"
    PASSWORD_CHANGE = "password_change"
    SHEETS_CONFIG_UPDATE = "sheets_config_update"
    CSV_EXPORT = "csv_export"
    AUTO_SYNC_TOGGLE = "auto_sync_toggle"
    # Sync
    SHEETS_PUSH = "sheets_push"
    SHEETS_PULL = "sheets_pull"
    OFFLINE_REPLAY = "offline_replay"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


ACTOR_ADMIN = "admin"
ACTOR_CLIENT = "client"
ACTOR_SYSTEM = "system"


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: Optional[str] = None,
    target_id: Optional[Any] = None,
    actor: str = ACTOR_CLIENT,
    reason: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
):
    """Central audit logging helper.

    Ensures consistent schema and a single place for enrichment.
    """
    # Ensure we persist pure string values, not Enum reprs (avoid 'AuditAction.XYZ')
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    audit_log = schemas.AuditLogCreate(
        action_type=action_value,
        status=status_value,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
        reason=reason,
        metadata=metadata or {},
    )
    return audit_repo.create_audit_log(db, audit_log=audit_log, actor=actor)


def try_log(db: Session, **kwargs) -> None:
    """Write an audit record; failures are logged and never reach the caller."""
    try:
        log(db, **kwargs)
    except Exception as exc:
        db.rollback()
        logger.warning("audit_write_failed action=%s error=%s", kwargs.get("action"), exc)


def log_volunteer(db: Session, *, volunteer_id: int, action: AuditAction, actor: str = ACTOR_CLIENT, name: Optional[str] = None):
    try_log(
        db,
        action=action,
        target_type="volunteer",
        target_id=volunteer_id,
        actor=actor,
        metadata={"name": name} if name else None,
    )


def log_event(db: Session, *, event_id: int, action: AuditAction, actor: str = ACTOR_CLIENT, metadata: Optional[Dict[str, Any]] = None):
    try_log(
        db,
        action=action,
        target_type="event",
        target_id=event_id,
        actor=actor,
        metadata=metadata,
    )


__all__ = [
    "AuditAction",
    "AuditStatus",
    "ACTOR_ADMIN",
    "ACTOR_CLIENT",
    "ACTOR_SYSTEM",
    "log",
    "try_log",
    "log_volunteer",
    "log_event",
]
