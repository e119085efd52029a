"""
Service layer for business logic.

This module exports all service classes for use in API endpoints.
"""

from backend.src.services.event_service import EventService
from backend.src.services.event_store import EventStore, SqlAlchemyEventStore
from backend.src.services.guid import GuidService

__all__ = [
    "EventService",
    "EventStore",
    "SqlAlchemyEventStore",
    "GuidService",
]
