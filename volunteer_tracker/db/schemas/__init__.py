"""
Domain-split Pydantic schemas.

Wire models serialize with camelCase aliases (see `CamelModel`).
"""

# Import order: define base/simple types first to satisfy forward refs
from .common import CamelModel
from .events import EventBase, EventCreate, Event
from .volunteers import (
    VolunteerBase,
    VolunteerCreate,
    VolunteerUpdate,
    Volunteer,
    VolunteerWithCount,
    VolunteerStats,
    VolunteerDetails,
)
from .admin import AdminVerifyRequest, PasswordChange, GoogleSheetsConfig, GoogleSheetsConfigView
from .sync import (
    AutoSyncToggle,
    SyncStatus,
    SkippedRow,
    SyncReport,
    TwoWaySyncReport,
    AutoSyncToggleResult,
    ReplayOperation,
    ReplayRequest,
    ReplayResult,
    ReplayResponse,
)
from .audits import AuditLogBase, AuditLogCreate, AuditLog

__all__ = [
    "CamelModel",
    "EventBase",
    "EventCreate",
    "Event",
    "VolunteerBase",
    "VolunteerCreate",
    "VolunteerUpdate",
    "Volunteer",
    "VolunteerWithCount",
    "VolunteerStats",
    "VolunteerDetails",
    "AdminVerifyRequest",
    "PasswordChange",
    "GoogleSheetsConfig",
    "GoogleSheetsConfigView",
    "AutoSyncToggle",
    "SyncStatus",
    "SkippedRow",
    "SyncReport",
    "TwoWaySyncReport",
    "AutoSyncToggleResult",
    "ReplayOperation",
    "ReplayRequest",
    "ReplayResult",
    "ReplayResponse",
    "AuditLogBase",
    "AuditLogCreate",
    "AuditLog",
]
