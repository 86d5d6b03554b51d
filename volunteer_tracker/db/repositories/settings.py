"""
Key/value settings repository.

Holds mutable runtime configuration: the admin password hash, spreadsheet
credentials and sync bookkeeping.
"""
from __future__ import annotations

from typing import Optional
from sqlalchemy.orm import Session

from volunteer_tracker.db import models

ADMIN_PASSWORD_HASH = "adminPasswordHash"
SHEETS_SHEET_ID = "googleSheetId"
SHEETS_SERVICE_ACCOUNT = "googleServiceAccount"
LAST_SYNC_TIME = "lastSyncTime"
LAST_PULL_TIME = "lastPullTime"
AUTO_SYNC_ENABLED = "autoSyncEnabled"


def get_setting(db: Session, key: str) -> Optional[str]:
    row = db.query(models.Setting).filter(models.Setting.key == key).first()
    return row.value if row else None


def update_setting(db: Session, key: str, value: str) -> models.Setting:
    row = db.query(models.Setting).filter(models.Setting.key == key).first()
    if row:
        row.value = value
    else:
        row = models.Setting(key=key, value=value)
        db.add(row)
    db.commit()
    db.refresh(row)
    return row


def get_bool_setting(db: Session, key: str, default: bool = False) -> bool:
    value = get_setting(db, key)
    if value is None:
        return default
    return value == "true"


def set_bool_setting(db: Session, key: str, enabled: bool) -> models.Setting:
    return update_setting(db, key, "true" if enabled else "false")
