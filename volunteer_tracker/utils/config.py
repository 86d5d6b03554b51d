"""
Application configuration sourced from environment variables.

Mutable runtime settings (admin password, spreadsheet credentials, sync
timestamps) are stored in the database; see the key constants in
`volunteer_tracker.db.repositories.settings`.
"""
import os
from pathlib import Path
from typing import List


DEFAULT_DATA_DIR = "data"
DEFAULT_DB_FILENAME = "volunteers.db"


class AppConfig:
    """Configuration for the service from environment variables."""

    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL", "").strip()
        self.data_dir = Path(os.getenv("VOLUNTEER_DATA_DIR", DEFAULT_DATA_DIR))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]
        static_dir = os.getenv("STATIC_DIR", "").strip()
        self.static_dir = Path(static_dir) if static_dir else None
        self.default_admin_password = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")
        self.host = os.getenv("HOST", "127.0.0.1")
        self.port = int(os.getenv("PORT", "5000"))
        self.sync_debounce_seconds = float(os.getenv("SHEETS_SYNC_DEBOUNCE_SECONDS", "3"))

    def sqlite_url(self) -> str:
        return f"sqlite:///{self.data_dir / DEFAULT_DB_FILENAME}"

    def resolved_database_url(self) -> str:
        """Return DATABASE_URL, or a file-backed SQLite URL inside data_dir."""
        return self.database_url or self.sqlite_url()

    def static_enabled(self) -> bool:
        return bool(self.static_dir and (self.static_dir / "index.html").is_file())

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if self.port <= 0 or self.port > 65535:
            errors.append("PORT must be between 1 and 65535")
        if self.sync_debounce_seconds < 0:
            errors.append("SHEETS_SYNC_DEBOUNCE_SECONDS must not be negative")
        if len(self.default_admin_password) < 6:
            errors.append("DEFAULT_ADMIN_PASSWORD must be at least 6 characters")
        if self.static_dir and not self.static_enabled():
            errors.append(f"STATIC_DIR {self.static_dir} does not contain index.html")
        return errors


def get_config() -> AppConfig:
    return AppConfig()
