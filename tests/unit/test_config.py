from pathlib import Path

from volunteer_tracker.utils.config import AppConfig


def test_defaults(monkeypatch):
    for name in (
        "DATABASE_URL", "VOLUNTEER_DATA_DIR", "CORS_ORIGINS", "STATIC_DIR", "HOST", "PORT", "SHEETS_SYNC_DEBOUNCE_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    config = AppConfig()
    assert config.resolved_database_url() == f"sqlite:///{Path('data') / 'volunteers.db'}"
    assert config.cors_origins == ["*"]
    assert config.host == "127.0.0.1"
    assert config.port == 5000
    assert config.static_enabled() is False
    assert config.validate() == []


def test_database_url_wins(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/volunteers")
    assert AppConfig().resolved_database_url() == "postgresql://u:p@db/volunteers"


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    assert AppConfig().cors_origins == ["http://a.test", "http://b.test"]


def test_validate_reports_problems(monkeypatch, tmp_path):
    monkeypatch.setenv("PORT", "70000")
    monkeypatch.setenv("SHEETS_SYNC_DEBOUNCE_SECONDS", "-1")
    monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", "abc")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path))
    errors = AppConfig().validate()
    assert len(errors) == 4


def test_static_enabled_with_index(monkeypatch, tmp_path):
    (tmp_path / "index.html").write_text("<html></html>")
    monkeypatch.setenv("STATIC_DIR", str(tmp_path))
    assert AppConfig().static_enabled() is True
