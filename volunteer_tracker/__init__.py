"""Volunteer and event-hours tracking service."""

__version__ = "1.0.0"
