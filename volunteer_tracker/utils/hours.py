"""
Duration helpers for hour strings in ``H:MM`` form.

Hours are unbounded, minutes are two digits between 00 and 59. Totals carry
excess minutes into hours.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Iterable, Optional

HOURS_PATTERN = re.compile(r"([0-9]+):([0-5][0-9])")
DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def is_valid_hours(value: Optional[str]) -> bool:
    return bool(value) and HOURS_PATTERN.fullmatch(value) is not None


def parse_hours(value: str) -> int:
    """Return the number of minutes encoded by an ``H:MM`` string."""
    match = HOURS_PATTERN.fullmatch(value or "")
    if not match:
        raise ValueError(f"Hours must be in HH:MM format, got {value!r}")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(total_minutes: int) -> str:
    if total_minutes < 0:
        raise ValueError("Duration cannot be negative")
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}:{minutes:02d}"


def sum_hours(values: Iterable[str]) -> str:
    return format_minutes(sum(parse_hours(v) for v in values))


def progress_percentage(total: str, goal: Optional[str]) -> int:
    """Percentage of ``goal`` reached by ``total``, rounded and capped at 100."""
    if not goal:
        return 0
    goal_minutes = parse_hours(goal)
    if goal_minutes == 0:
        return 0
    # Half-up integer rounding
    pct = (parse_hours(total) * 200 + goal_minutes) // (goal_minutes * 2)
    return min(100, pct)


def is_valid_date(value: Optional[str]) -> bool:
    """True for ``YYYY-MM-DD`` strings naming a real calendar date."""
    if not value or not DATE_PATTERN.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True
