"""CSV export of every logged event alongside its volunteer."""
from __future__ import annotations

import csv
import io
from typing import Iterable, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from volunteer_tracker.db import models

CSV_FILENAME = "volunteer_events.csv"
CSV_HEADER = ["Volunteer ID", "Volunteer Name", "Email", "Date", "Event", "Location", "Hours"]


def export_rows(db: Session) -> List[List[str]]:
    """One row per event, ordered by volunteer name then newest date first."""
    rows = (
        db.query(models.Volunteer, models.Event)
        .join(models.Event, models.Event.volunteer_id == models.Volunteer.id)
        .order_by(
            func.lower(models.Volunteer.name),
            models.Volunteer.id,
            models.Event.date.desc(),
            models.Event.id.desc(),
        )
        .all()
    )
    return [
        [str(v.id), v.name, v.email or "", e.date, e.event, e.location, e.hours]
        for v, e in rows
    ]


def render_csv(rows: Iterable[List[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(rows)
    return buffer.getvalue()


def export_csv(db: Session) -> str:
    return render_csv(export_rows(db))
