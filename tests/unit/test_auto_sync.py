import threading

import pytest

from volunteer_tracker.db import models, schemas
from volunteer_tracker.db.repositories import settings as settings_repo
from volunteer_tracker.db.repositories import volunteers as volunteer_repo
from volunteer_tracker.services import auto_sync
from volunteer_tracker.services.auto_sync import AutoSyncScheduler
from volunteer_tracker.utils.feature_flags import refresh_feature_flag_cache


def test_requests_within_debounce_window_coalesce():
    calls = []
    scheduler = AutoSyncScheduler(lambda: calls.append(1), debounce_seconds=0.05)

    for _ in range(5):
        scheduler.request()

    assert scheduler.wait_idle(timeout=5)
    assert calls == [1]


def test_requests_during_run_cause_one_follow_up():
    started = threading.Event()
    release = threading.Event()
    calls = []

    def runner():
        calls.append(1)
        if len(calls) == 1:
            started.set()
            release.wait(timeout=5)

    scheduler = AutoSyncScheduler(runner, debounce_seconds=0)
    scheduler.request()
    assert started.wait(timeout=5)
    assert scheduler.running

    scheduler.request()
    scheduler.request()
    scheduler.request()
    release.set()

    assert scheduler.wait_idle(timeout=5)
    assert len(calls) == 2


def test_runner_errors_are_logged_not_raised(caplog):
    def runner():
        raise RuntimeError("sheets down")

    scheduler = AutoSyncScheduler(runner, debounce_seconds=0)
    scheduler.request()

    assert scheduler.wait_idle(timeout=5)
    assert "sheets down" in caplog.text


def test_cancel_drops_scheduled_run():
    calls = []
    scheduler = AutoSyncScheduler(lambda: calls.append(1), debounce_seconds=10)
    scheduler.request()
    scheduler.cancel()

    assert scheduler.wait_idle(timeout=1)
    assert calls == []


def test_request_auto_sync_respects_feature_flag(monkeypatch):
    requested = []

    class _Recorder:
        def request(self):
            requested.append(1)

    monkeypatch.setattr(auto_sync, "get_auto_sync_scheduler", lambda: _Recorder())

    # conftest disables AUTO_SYNC_ENABLED
    auto_sync.request_auto_sync()
    assert requested == []

    monkeypatch.setenv("AUTO_SYNC_ENABLED", "true")
    refresh_feature_flag_cache()
    auto_sync.request_auto_sync()
    assert requested == [1]


@pytest.fixture
def shared_session(monkeypatch, db_session):
    monkeypatch.setattr(auto_sync, "new_session", lambda: db_session)
    return db_session


def test_run_auto_sync_skips_when_toggled_off(shared_session, fake_sheets, sheets_configured):
    auto_sync.run_auto_sync()

    assert fake_sheets.sheets == {}
    assert settings_repo.get_setting(shared_session, settings_repo.LAST_SYNC_TIME) is None


def test_run_auto_sync_skips_when_not_configured(shared_session, fake_sheets):
    settings_repo.set_bool_setting(shared_session, settings_repo.AUTO_SYNC_ENABLED, True)

    auto_sync.run_auto_sync()

    assert fake_sheets.sheets == {}
    assert settings_repo.get_setting(shared_session, settings_repo.LAST_SYNC_TIME) is None


def test_run_auto_sync_pushes_when_enabled_and_configured(shared_session, fake_sheets, sheets_configured):
    settings_repo.set_bool_setting(shared_session, settings_repo.AUTO_SYNC_ENABLED, True)
    volunteer_id = volunteer_repo.create_volunteer(shared_session, schemas.VolunteerCreate(name="Alice")).id

    auto_sync.run_auto_sync()

    assert f"Volunteer {volunteer_id} - Alice" in fake_sheets.sheets
    assert settings_repo.get_setting(shared_session, settings_repo.LAST_SYNC_TIME) is not None
    push = shared_session.query(models.AuditLog).filter(models.AuditLog.action_type == "sheets_push").one()
    assert push.actor == "system"
