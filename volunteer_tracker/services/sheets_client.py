"""Spreadsheet client abstraction backed by the Google Sheets v4 API."""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from google.auth.exceptions import GoogleAuthError, TransportError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

SCOPES: Sequence[str] = ("https://www.googleapis.com/auth/spreadsheets",)
RETRYABLE_STATUS = {429, 500, 502, 503, 504}
BACKOFF_SCHEDULE = (1, 2, 4, 8)


class SheetsClientError(RuntimeError):
    """Raised when the spreadsheet service rejects or fails a request."""


def is_transient_error(exc: Exception) -> bool:
    """True for rate-limit or server HTTP statuses and for network failures."""
    if isinstance(exc, HttpError):
        return getattr(exc.resp, "status", None) in RETRYABLE_STATUS
    return isinstance(exc, (TransportError, OSError))


def _error_label(exc: Exception) -> str:
    if isinstance(exc, HttpError):
        return str(getattr(exc.resp, "status", "http"))
    return type(exc).__name__


class BaseSheetsClient:
    """Minimal tabular-store surface used by the sync service."""

    def list_sheet_titles(self) -> List[str]:
        raise NotImplementedError

    def add_sheets(self, titles: Sequence[str]) -> None:
        raise NotImplementedError

    def delete_sheets(self, titles: Sequence[str]) -> None:
        raise NotImplementedError

    def clear_values(self, sheet_title: str) -> None:
        raise NotImplementedError

    def update_values(self, sheet_title: str, values: List[List[Any]]) -> None:
        raise NotImplementedError

    def get_values(self, sheet_title: str) -> List[List[str]]:
        raise NotImplementedError


def quote_sheet_title(title: str) -> str:
    """Return an A1-notation sheet reference, escaping embedded quotes."""
    return "'" + title.replace("'", "''") + "'"


class GoogleSheetsClient(BaseSheetsClient):
    def __init__(
        self,
        spreadsheet_id: str,
        service_account_info: Dict[str, Any],
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id
        try:
            credentials = service_account.Credentials.from_service_account_info(
                service_account_info, scopes=list(SCOPES)
            )
        except (ValueError, KeyError) as exc:
            raise SheetsClientError(f"Invalid service account credentials: {exc}") from exc
        self._service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        self._sleep = sleep

    @classmethod
    def from_json(cls, spreadsheet_id: str, service_account_json: str) -> "GoogleSheetsClient":
        try:
            info = json.loads(service_account_json)
        except json.JSONDecodeError as exc:
            raise SheetsClientError("Invalid service account JSON format") from exc
        return cls(spreadsheet_id, info)

    def _execute(self, request, description: str):
        """Execute a googleapiclient request, retrying transient failures."""
        attempts = len(BACKOFF_SCHEDULE) + 1
        for attempt in range(1, attempts + 1):
            try:
                return request.execute()
            except (HttpError, GoogleAuthError, OSError) as exc:
                if attempt < attempts and is_transient_error(exc):
                    delay = BACKOFF_SCHEDULE[attempt - 1]
                    logger.warning(
                        "sheets_request_retry op=%s error=%s attempt=%d delay=%ss",
                        description, _error_label(exc), attempt, delay,
                    )
                    self._sleep(delay)
                    continue
                raise SheetsClientError(f"Google Sheets {description} failed: {exc}") from exc

    def list_sheet_titles(self) -> List[str]:
        request = self._service.spreadsheets().get(
            spreadsheetId=self.spreadsheet_id, fields="sheets.properties.title"
        )
        data = self._execute(request, "get spreadsheet")
        return [s.get("properties", {}).get("title") for s in data.get("sheets", [])]

    def add_sheets(self, titles: Sequence[str]) -> None:
        if not titles:
            return
        body = {"requests": [{"addSheet": {"properties": {"title": t}}} for t in titles]}
        request = self._service.spreadsheets().batchUpdate(spreadsheetId=self.spreadsheet_id, body=body)
        self._execute(request, "add sheets")

    def delete_sheets(self, titles: Sequence[str]) -> None:
        if not titles:
            return
        request = self._service.spreadsheets().get(
            spreadsheetId=self.spreadsheet_id, fields="sheets.properties(sheetId,title)"
        )
        data = self._execute(request, "get spreadsheet")
        ids = {
            s["properties"].get("title"): s["properties"].get("sheetId", 0)
            for s in data.get("sheets", [])
            if "properties" in s
        }
        body = {"requests": [{"deleteSheet": {"sheetId": ids[t]}} for t in titles if t in ids]}
        if not body["requests"]:
            return
        request = self._service.spreadsheets().batchUpdate(spreadsheetId=self.spreadsheet_id, body=body)
        self._execute(request, "delete sheets")

    def clear_values(self, sheet_title: str) -> None:
        request = self._service.spreadsheets().values().clear(
            spreadsheetId=self.spreadsheet_id, range=quote_sheet_title(sheet_title), body={}
        )
        self._execute(request, "clear values")

    def update_values(self, sheet_title: str, values: List[List[Any]]) -> None:
        request = self._service.spreadsheets().values().update(
            spreadsheetId=self.spreadsheet_id,
            range=f"{quote_sheet_title(sheet_title)}!A1",
            valueInputOption="RAW",
            body={"values": values},
        )
        self._execute(request, "update values")

    def get_values(self, sheet_title: str) -> List[List[str]]:
        request = self._service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id,
            range=quote_sheet_title(sheet_title),
            valueRenderOption="FORMATTED_VALUE",
        )
        data = self._execute(request, "get values")
        return [[str(cell) for cell in row] for row in data.get("values", [])]


SheetsClientFactory = Callable[[str, str], BaseSheetsClient]

_client_factory: Optional[SheetsClientFactory] = None


def get_sheets_client(spreadsheet_id: str, service_account_json: str) -> BaseSheetsClient:
    """Build a client for the configured spreadsheet."""
    factory = _client_factory or GoogleSheetsClient.from_json
    return factory(spreadsheet_id, service_account_json)


def set_sheets_client_factory(factory: Optional[SheetsClientFactory]) -> None:
    """Swap the client factory (tests install an in-memory fake)."""
    global _client_factory
    _client_factory = factory
