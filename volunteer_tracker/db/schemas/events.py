from pydantic import field_validator

from volunteer_tracker.utils.hours import is_valid_date, is_valid_hours
from .common import CamelModel


class EventBase(CamelModel):
    volunteer_id: int
    event: str
    location: str
    hours: str
    date: str


class EventCreate(EventBase):
    @field_validator("event")
    @classmethod
    def _validate_event(cls, v: str):
        cleaned = (v or "").strip()
        if not cleaned:
            raise ValueError("Event name is required")
        return cleaned

    @field_validator("location")
    @classmethod
    def _validate_location(cls, v: str):
        cleaned = (v or "").strip()
        if not cleaned:
            raise ValueError("Location is required")
        return cleaned

    @field_validator("hours")
    @classmethod
    def _validate_hours(cls, v: str):
        cleaned = (v or "").strip()
        if not is_valid_hours(cleaned):
            raise ValueError("Hours must be in HH:MM format")
        return cleaned

    @field_validator("date")
    @classmethod
    def _validate_date(cls, v: str):
        cleaned = (v or "").strip()
        if not is_valid_date(cleaned):
            raise ValueError("Date must be in YYYY-MM-DD format")
        return cleaned


class Event(EventBase):
    id: int
