"""
Google Sheets synchronization.

Push writes a `Volunteers` summary sheet plus one sheet per volunteer.
Pull reconciles those sheets back into the database. Sheet rows carry no
stable record ids, so events are matched on ``(date, event, location)``
with event and location compared case-insensitively; each local event is
consumed by at most one row. On pull the sheet wins on hours and local
events missing from the sheet are kept.
"""
from __future__ import annotations

import json
import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError
from sqlalchemy.orm import Session

from volunteer_tracker import audit
from volunteer_tracker.db import models, schemas
from volunteer_tracker.db.repositories import events as event_repo
from volunteer_tracker.db.repositories import settings as settings_repo
from volunteer_tracker.db.repositories import volunteers as volunteer_repo
from volunteer_tracker.services import records
from volunteer_tracker.services.sheets_client import BaseSheetsClient, SheetsClientError, get_sheets_client
from volunteer_tracker.utils.hours import sum_hours

logger = logging.getLogger(__name__)

VOLUNTEERS_SHEET = "Volunteers"
VOLUNTEERS_HEADER = ["Volunteer ID", "Name", "Total Events", "Total Hours"]
EVENTS_HEADER = ["Date", "Event", "Location", "Hours"]
TOTAL_HOURS_LABEL = "Total Hours:"
MAX_SHEET_TITLE_LENGTH = 30

_UNSAFE_TITLE_CHARS = re.compile(r"[^\w\s]", re.ASCII)
_VOLUNTEER_TITLE = re.compile(r"^Volunteer (\d+) - (.*)$", re.DOTALL)


class SheetsNotConfigured(RuntimeError):
    """No spreadsheet id or service account has been stored."""


class SheetsSyncError(RuntimeError):
    """The spreadsheet service failed during a sync run."""


@dataclass(frozen=True)
class SheetsSettings:
    sheet_id: str
    service_account_json: str

    @property
    def client_email(self) -> Optional[str]:
        try:
            return json.loads(self.service_account_json).get("client_email")
        except (json.JSONDecodeError, AttributeError):
            return None


def load_sheets_settings(db: Session) -> Optional[SheetsSettings]:
    sheet_id = settings_repo.get_setting(db, settings_repo.SHEETS_SHEET_ID)
    service_account = settings_repo.get_setting(db, settings_repo.SHEETS_SERVICE_ACCOUNT)
    if not sheet_id or not service_account:
        return None
    return SheetsSettings(sheet_id=sheet_id, service_account_json=service_account)


def sheets_configured(db: Session) -> bool:
    return load_sheets_settings(db) is not None


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_sheet_name(volunteer_id: int, name: str) -> str:
    safe_name = _UNSAFE_TITLE_CHARS.sub("", name or "")
    return f"Volunteer {volunteer_id} - {safe_name}"[:MAX_SHEET_TITLE_LENGTH]


def parse_sheet_name(title: str) -> Optional[Tuple[int, str]]:
    """Return ``(volunteer_id, name)`` for a per-volunteer sheet title."""
    match = _VOLUNTEER_TITLE.match(title or "")
    if not match:
        return None
    return int(match.group(1)), match.group(2).strip()


def build_volunteers_rows(
    volunteers: Sequence[models.Volunteer], grouped: Dict[int, List[models.Event]]
) -> List[List[str]]:
    rows = [list(VOLUNTEERS_HEADER)]
    for v in volunteers:
        volunteer_events = grouped.get(v.id, [])
        rows.append([str(v.id), v.name, str(len(volunteer_events)), sum_hours(e.hours for e in volunteer_events)])
    return rows


def build_volunteer_rows(volunteer_events: Sequence[models.Event]) -> List[List[str]]:
    ordered = sorted(volunteer_events, key=lambda e: e.date, reverse=True)
    rows: List[List[str]] = [list(EVENTS_HEADER)]
    rows.extend([e.date, e.event, e.location, e.hours] for e in ordered)
    rows.append([])
    rows.append([TOTAL_HOURS_LABEL, sum_hours(e.hours for e in ordered), f"Total Events: {len(ordered)}"])
    return rows


def _stale_volunteer_sheets(titles: Sequence[str], current: Dict[int, str]) -> List[str]:
    """Per-volunteer sheets left behind by a rename of a local volunteer."""
    stale = []
    for title in titles:
        parsed = parse_sheet_name(title)
        if parsed is not None and parsed[0] in current and current[parsed[0]] != title:
            stale.append(title)
    return stale


def push_to_sheets(db: Session, client: BaseSheetsClient) -> int:
    """Write every volunteer to the spreadsheet; returns the volunteer count."""
    volunteers = volunteer_repo.get_volunteers(db)
    grouped = records.events_by_volunteer(db)

    sheet_titles = {v.id: build_sheet_name(v.id, v.name) for v in volunteers}
    payloads: List[Tuple[str, List[List[str]]]] = [(VOLUNTEERS_SHEET, build_volunteers_rows(volunteers, grouped))]
    for v in volunteers:
        payloads.append((sheet_titles[v.id], build_volunteer_rows(grouped.get(v.id, []))))

    existing = client.list_sheet_titles()
    missing = [title for title, _ in payloads if title not in existing]
    if missing:
        client.add_sheets(missing)
    stale = _stale_volunteer_sheets(existing, sheet_titles)
    if stale:
        client.delete_sheets(stale)

    for title, rows in payloads:
        client.clear_values(title)
        client.update_values(title, rows)
    logger.info(
        "sheets_push_complete volunteers=%d sheets_created=%d sheets_removed=%d",
        len(volunteers), len(missing), len(stale),
    )
    return len(volunteers)


def _cell(row: Sequence[str], index: int) -> str:
    return str(row[index]).strip() if index < len(row) and row[index] is not None else ""


def _is_blank(row: Sequence[str]) -> bool:
    return not any(_cell(row, i) for i in range(len(row)))


def _validation_reason(exc: ValidationError) -> str:
    message = exc.errors()[0].get("msg", str(exc))
    return message.removeprefix("Value error, ")


def _event_key(date: str, event: str, location: str) -> Tuple[str, str, str]:
    return date.strip(), event.strip().lower(), location.strip().lower()


class _PullResult:
    def __init__(self):
        self.volunteers_created = 0
        self.events_created = 0
        self.events_updated = 0
        self.rows_skipped: List[schemas.SkippedRow] = []

    def skip(self, sheet: str, row: int, reason: str) -> None:
        self.rows_skipped.append(schemas.SkippedRow(sheet=sheet, row=row, reason=reason))


def _create_volunteer(db: Session, name: str, result: _PullResult) -> models.Volunteer:
    db_volunteer = records.create_volunteer(db, schemas.VolunteerCreate(name=name), actor=audit.ACTOR_SYSTEM)
    result.volunteers_created += 1
    return db_volunteer


def _pull_volunteers_sheet(db: Session, rows: List[List[str]], result: _PullResult) -> None:
    for index, row in enumerate(rows, start=1):
        if index == 1 and _cell(row, 0).lower() == VOLUNTEERS_HEADER[0].lower():
            continue
        if _is_blank(row):
            continue
        name = _cell(row, 1)
        if not name:
            result.skip(VOLUNTEERS_SHEET, index, "Name is required")
            continue
        if volunteer_repo.get_volunteer_by_name(db, name) is None:
            _create_volunteer(db, name, result)


def _resolve_volunteer(
    db: Session, title: str, volunteer_id: int, name: str, result: _PullResult
) -> Optional[models.Volunteer]:
    # Ids differ between installs; trust one only when the title agrees with the local name
    db_volunteer = volunteer_repo.get_volunteer(db, volunteer_id)
    if db_volunteer is not None and build_sheet_name(db_volunteer.id, db_volunteer.name) == title:
        return db_volunteer
    if not name:
        return None
    db_volunteer = volunteer_repo.get_volunteer_by_name(db, name)
    if db_volunteer is not None:
        return db_volunteer
    # Titles drop punctuation and are truncated
    for candidate in volunteer_repo.get_volunteers(db):
        if build_sheet_name(volunteer_id, candidate.name) == title:
            return candidate
    return _create_volunteer(db, name, result)


def _pull_volunteer_sheet(
    db: Session, title: str, db_volunteer: models.Volunteer, rows: List[List[str]], result: _PullResult
) -> None:
    pool: Dict[Tuple[str, str, str], List[models.Event]] = defaultdict(list)
    for db_event in sorted(event_repo.get_events_by_volunteer(db, db_volunteer.id), key=lambda e: e.id):
        pool[_event_key(db_event.date, db_event.event, db_event.location)].append(db_event)

    for index, row in enumerate(rows, start=1):
        if index == 1 and _cell(row, 0).lower() == EVENTS_HEADER[0].lower():
            continue
        if _is_blank(row) or _cell(row, 0) == TOTAL_HOURS_LABEL:
            break
        try:
            payload = schemas.EventCreate(
                volunteer_id=db_volunteer.id,
                date=_cell(row, 0),
                event=_cell(row, 1),
                location=_cell(row, 2),
                hours=_cell(row, 3),
            )
        except ValidationError as exc:
            result.skip(title, index, _validation_reason(exc))
            continue

        matches = pool.get(_event_key(payload.date, payload.event, payload.location))
        if matches:
            db_event = matches.pop(0)
            if db_event.hours != payload.hours:
                records.update_event_hours(db, db_event, payload.hours, actor=audit.ACTOR_SYSTEM)
                result.events_updated += 1
        else:
            records.create_event(db, payload, actor=audit.ACTOR_SYSTEM)
            result.events_created += 1


def pull_from_sheets(db: Session, client: BaseSheetsClient) -> _PullResult:
    result = _PullResult()
    titles = client.list_sheet_titles()

    if VOLUNTEERS_SHEET in titles:
        _pull_volunteers_sheet(db, client.get_values(VOLUNTEERS_SHEET), result)

    for title in titles:
        parsed = parse_sheet_name(title)
        if parsed is None:
            continue
        volunteer_id, name = parsed
        db_volunteer = _resolve_volunteer(db, title, volunteer_id, name, result)
        if db_volunteer is None:
            result.skip(title, 0, "Sheet title does not identify a volunteer")
            continue
        _pull_volunteer_sheet(db, title, db_volunteer, client.get_values(title), result)

    logger.info(
        "sheets_pull_complete volunteers_created=%d events_created=%d events_updated=%d rows_skipped=%d",
        result.volunteers_created,
        result.events_created,
        result.events_updated,
        len(result.rows_skipped),
    )
    return result


def _open_client(db: Session) -> BaseSheetsClient:
    config = load_sheets_settings(db)
    if config is None:
        raise SheetsNotConfigured("Google Sheets is not configured")
    try:
        return get_sheets_client(config.sheet_id, config.service_account_json)
    except SheetsClientError as exc:
        raise SheetsSyncError(str(exc)) from exc


def _record_failure(db: Session, action: audit.AuditAction, actor: str, exc: Exception) -> None:
    logger.error("sheets_sync_failed action=%s error=%s", action.value, exc)
    audit.try_log(db, action=action, status=audit.AuditStatus.FAILURE, target_type="spreadsheet", actor=actor, reason=str(exc))


def run_push(db: Session, actor: str = audit.ACTOR_ADMIN) -> schemas.SyncReport:
    """Push local records to the configured spreadsheet and record the run."""
    client = _open_client(db)
    try:
        written = push_to_sheets(db, client)
    except SheetsClientError as exc:
        _record_failure(db, audit.AuditAction.SHEETS_PUSH, actor, exc)
        raise SheetsSyncError(str(exc)) from exc
    timestamp = utc_timestamp()
    settings_repo.update_setting(db, settings_repo.LAST_SYNC_TIME, timestamp)
    audit.try_log(
        db,
        action=audit.AuditAction.SHEETS_PUSH,
        target_type="spreadsheet",
        actor=actor,
        metadata={"volunteers_written": written},
    )
    return schemas.SyncReport(direction="push", message="Sync successful", timestamp=timestamp, volunteers_written=written)


def run_pull(db: Session, actor: str = audit.ACTOR_ADMIN) -> schemas.SyncReport:
    """Pull spreadsheet rows into the database and record the run."""
    client = _open_client(db)
    try:
        result = pull_from_sheets(db, client)
    except SheetsClientError as exc:
        _record_failure(db, audit.AuditAction.SHEETS_PULL, actor, exc)
        raise SheetsSyncError(str(exc)) from exc
    timestamp = utc_timestamp()
    settings_repo.update_setting(db, settings_repo.LAST_PULL_TIME, timestamp)
    audit.try_log(
        db,
        action=audit.AuditAction.SHEETS_PULL,
        target_type="spreadsheet",
        actor=actor,
        metadata={
            "volunteers_created": result.volunteers_created,
            "events_created": result.events_created,
            "events_updated": result.events_updated,
            "rows_skipped": len(result.rows_skipped),
        },
    )
    return schemas.SyncReport(
        direction="pull",
        message="Pull successful",
        timestamp=timestamp,
        volunteers_created=result.volunteers_created,
        events_created=result.events_created,
        events_updated=result.events_updated,
        rows_skipped=result.rows_skipped,
    )


def run_two_way(db: Session, actor: str = audit.ACTOR_ADMIN) -> schemas.TwoWaySyncReport:
    pulled = run_pull(db, actor=actor)
    pushed = run_push(db, actor=actor)
    return schemas.TwoWaySyncReport(pull=pulled, push=pushed)
