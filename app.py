"""ASGI entry point: ``uvicorn app:app``."""
from volunteer_tracker.api.main import app

__all__ = ["app"]
