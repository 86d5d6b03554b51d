"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc`, and all ORM classes.
"""

from .base import Base, now_utc  # re-export

from .volunteers import Volunteer, Event
from .settings import Setting
from .audit import AuditLog
from .replay import ReplayedOperation

__all__ = [
    # base
    "Base",
    "now_utc",
    # records
    "Volunteer",
    "Event",
    "Setting",
    # audit/sync
    "AuditLog",
    "ReplayedOperation",
]
