import re
from typing import List, Optional
from pydantic import field_validator

from volunteer_tracker.utils.hours import is_valid_hours
from .common import CamelModel
from .events import Event

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean_name(value: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError("Name is required")
    return cleaned


def _clean_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    if not EMAIL_PATTERN.match(cleaned):
        raise ValueError("Invalid email address")
    return cleaned


def _clean_hour_goal(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    if not cleaned:
        return None
    if not is_valid_hours(cleaned):
        raise ValueError("Hours must be in HH:MM format")
    return cleaned


class VolunteerBase(CamelModel):
    name: str
    email: Optional[str] = None
    hour_goal: Optional[str] = None


class VolunteerCreate(VolunteerBase):
    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str):
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: Optional[str]):
        return _clean_email(v)

    @field_validator("hour_goal")
    @classmethod
    def _validate_goal(cls, v: Optional[str]):
        return _clean_hour_goal(v)


class VolunteerUpdate(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    hour_goal: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: Optional[str]):
        if v is None:
            return v
        return _clean_name(v)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: Optional[str]):
        return _clean_email(v)

    @field_validator("hour_goal")
    @classmethod
    def _validate_goal(cls, v: Optional[str]):
        return _clean_hour_goal(v)


class Volunteer(VolunteerBase):
    id: int


class VolunteerWithCount(Volunteer):
    event_count: int = 0


class VolunteerStats(CamelModel):
    total_events: int
    total_hours: str
    progress_percentage: int
    hour_goal: Optional[str] = None


class VolunteerDetails(CamelModel):
    volunteer: Volunteer
    events: List[Event]
    stats: VolunteerStats
