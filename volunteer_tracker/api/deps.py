"""
API dependency helpers.

Admin routes authenticate with the ``X-Admin-Password`` header, checked
against the Argon2 hash kept in the settings table.
"""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from volunteer_tracker.db.database import get_db
from volunteer_tracker.db.repositories import settings as settings_repo
from volunteer_tracker.utils.config import get_config
from volunteer_tracker.utils.feature_flags import offline_replay_enabled, sheets_sync_enabled
from volunteer_tracker.utils.password_crypto import hash_password, needs_rehash, verify_password

logger = logging.getLogger(__name__)

ADMIN_HEADER = "X-Admin-Password"


def get_admin_password_hash(db: Session) -> str:
    """Return the stored admin hash, seeding it from DEFAULT_ADMIN_PASSWORD on first use."""
    stored = settings_repo.get_setting(db, settings_repo.ADMIN_PASSWORD_HASH)
    if stored:
        return stored
    logger.info("admin_password_seeded source=DEFAULT_ADMIN_PASSWORD")
    seeded = hash_password(get_config().default_admin_password)
    settings_repo.update_setting(db, settings_repo.ADMIN_PASSWORD_HASH, seeded)
    return seeded


def set_admin_password(db: Session, password: str) -> None:
    settings_repo.update_setting(db, settings_repo.ADMIN_PASSWORD_HASH, hash_password(password))


def check_admin_password(db: Session, password: Optional[str]) -> bool:
    if not password:
        return False
    stored = get_admin_password_hash(db)
    if not verify_password(password, stored):
        return False
    if needs_rehash(stored):
        set_admin_password(db, password)
    return True


def require_admin(
    db: Session = Depends(get_db),
    x_admin_password: Optional[str] = Header(default=None, alias=ADMIN_HEADER),
) -> None:
    if not check_admin_password(db, x_admin_password):
        logger.warning("admin_auth_failed header_present=%s", bool(x_admin_password))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin password")


def is_admin_request(
    db: Session = Depends(get_db),
    x_admin_password: Optional[str] = Header(default=None, alias=ADMIN_HEADER),
) -> bool:
    """Like `require_admin`, but reports the result instead of rejecting."""
    return check_admin_password(db, x_admin_password)


def require_sheets_sync() -> None:
    if not sheets_sync_enabled():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sheets sync disabled")


def require_offline_replay() -> None:
    if not offline_replay_enabled():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Offline replay disabled")
