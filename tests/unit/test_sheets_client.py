import httplib2
import pytest
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from volunteer_tracker.services import sheets_client
from volunteer_tracker.services.sheets_client import (
    GoogleSheetsClient,
    SheetsClientError,
    get_sheets_client,
    quote_sheet_title,
    set_sheets_client_factory,
)


class _Request:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def execute(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _http_error(status):
    return HttpError(httplib2.Response({"status": status}), b'{"error": {"message": "backend"}}')


def _client():
    client = GoogleSheetsClient.__new__(GoogleSheetsClient)
    client.spreadsheet_id = "sheet-1"
    client.sleeps = []
    client._sleep = client.sleeps.append
    return client


def test_retries_transient_errors_with_backoff():
    client = _client()
    request = _Request([_http_error(429), _http_error(503), {"ok": True}])

    assert client._execute(request, "get values") == {"ok": True}
    assert request.calls == 3
    assert client.sleeps == [1, 2]


def test_gives_up_after_every_backoff_step():
    client = _client()
    request = _Request([_http_error(500)] * 5)

    with pytest.raises(SheetsClientError, match="update values"):
        client._execute(request, "update values")
    assert request.calls == 5
    assert client.sleeps == [1, 2, 4, 8]


def test_client_errors_are_not_retried():
    client = _client()
    request = _Request([_http_error(403)])

    with pytest.raises(SheetsClientError, match="get spreadsheet"):
        client._execute(request, "get spreadsheet")
    assert client.sleeps == []


def test_refresh_errors_become_client_errors():
    client = _client()
    request = _Request([RefreshError("invalid_grant: account disabled")])

    with pytest.raises(SheetsClientError, match="invalid_grant"):
        client._execute(request, "get spreadsheet")
    assert request.calls == 1
    assert client.sleeps == []


def test_network_failures_are_retried():
    client = _client()
    request = _Request([TransportError("connection reset"), TimeoutError("read timed out"), {"ok": True}])

    assert client._execute(request, "get values") == {"ok": True}
    assert client.sleeps == [1, 2]


def test_network_failure_after_retries_becomes_client_error():
    client = _client()
    request = _Request([ConnectionResetError("reset by peer")] * 5)

    with pytest.raises(SheetsClientError, match="reset by peer"):
        client._execute(request, "clear values")
    assert request.calls == 5


class _Spreadsheets:
    def __init__(self, sheets):
        self.sheets = sheets
        self.batches = []

    def get(self, **kwargs):
        return _Request([{"sheets": [{"properties": p} for p in self.sheets]}])

    def batchUpdate(self, spreadsheetId, body):
        self.batches.append(body)
        return _Request([{}])


class _Service:
    def __init__(self, spreadsheets):
        self._spreadsheets = spreadsheets

    def spreadsheets(self):
        return self._spreadsheets


def test_delete_sheets_resolves_sheet_ids():
    spreadsheets = _Spreadsheets([{"sheetId": 0, "title": "Volunteers"}, {"sheetId": 41, "title": "Volunteer 1 - Alice"}])
    client = _client()
    client._service = _Service(spreadsheets)

    client.delete_sheets(["Volunteer 1 - Alice", "Missing"])

    assert spreadsheets.batches == [{"requests": [{"deleteSheet": {"sheetId": 41}}]}]


def test_invalid_service_account_json():
    with pytest.raises(SheetsClientError, match="Invalid service account JSON format"):
        GoogleSheetsClient.from_json("sheet-1", "{not json")


def test_quote_sheet_title_escapes_quotes():
    assert quote_sheet_title("Volunteer 1 - O'Neil") == "'Volunteer 1 - O''Neil'"


def test_factory_override(monkeypatch):
    sentinel = object()
    set_sheets_client_factory(lambda sheet_id, info: sentinel)
    assert get_sheets_client("sheet-1", "{}") is sentinel
    set_sheets_client_factory(None)
    assert sheets_client._client_factory is None
