from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import Field, field_validator

from .common import CamelModel


class AutoSyncToggle(CamelModel):
    enabled: bool


class SyncStatus(CamelModel):
    last_sync_time: Optional[str] = None
    last_pull_time: Optional[str] = None
    auto_sync_enabled: bool = False
    sheets_configured: bool = False


class SkippedRow(CamelModel):
    sheet: str
    row: int
    reason: str


class SyncReport(CamelModel):
    direction: str
    message: str
    timestamp: str
    volunteers_written: int = 0
    volunteers_created: int = 0
    events_created: int = 0
    events_updated: int = 0
    rows_skipped: List[SkippedRow] = Field(default_factory=list)


class TwoWaySyncReport(CamelModel):
    pull: SyncReport
    push: SyncReport


class AutoSyncToggleResult(CamelModel):
    message: str
    auto_sync_enabled: bool


class ReplayOperation(CamelModel):
    id: str
    type: Optional[str] = None
    method: str
    url: str
    body: Optional[Dict[str, Any]] = None
    queued_at: Optional[datetime] = None
    temp_id: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Union[str, int]):
        if v is None or str(v).strip() == "":
            raise ValueError("Operation id is required")
        return str(v).strip()

    @field_validator("method")
    @classmethod
    def _upper_method(cls, v: str):
        return (v or "").strip().upper()


class ReplayRequest(CamelModel):
    operations: List[ReplayOperation]


class ReplayResult(CamelModel):
    id: str
    status: str
    http_status: int
    data: Optional[Any] = None
    error: Optional[str] = None


class ReplayResponse(CamelModel):
    results: List[ReplayResult]
    id_map: Dict[str, Dict[str, int]] = Field(default_factory=dict)
