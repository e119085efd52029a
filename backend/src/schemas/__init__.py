"""
Pydantic schemas for API request/response validation.

This module exports all schema classes for use in API endpoints.
"""

from backend.src.schemas.event import (
    Recurrence,
    EventPayload,
    EventResponse,
)

__all__ = [
    "Recurrence",
    "EventPayload",
    "EventResponse",
]
