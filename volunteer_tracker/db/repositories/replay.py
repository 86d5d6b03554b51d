"""
Replay ledger for operations queued by offline clients.
"""
from __future__ import annotations

from typing import Any, Optional
from sqlalchemy.orm import Session

from volunteer_tracker.db import models


def get_replayed_operation(db: Session, operation_id: str):
    return (
        db.query(models.ReplayedOperation)
        .filter(models.ReplayedOperation.operation_id == operation_id)
        .first()
    )


def record_replayed_operation(
    db: Session,
    *,
    operation_id: str,
    operation_type: Optional[str],
    method: str,
    url: str,
    status: str,
    http_status: int,
    result_id: Optional[int] = None,
    response: Any = None,
):
    row = models.ReplayedOperation(
        operation_id=operation_id,
        operation_type=operation_type,
        method=method,
        url=url,
        status=status,
        http_status=http_status,
        result_id=result_id,
        response=response,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
