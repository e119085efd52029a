"""
SQLAlchemy models for the calendar backend.

This module provides the declarative base class and imports all models
to ensure they are registered with SQLAlchemy's metadata.
"""

from sqlalchemy.orm import declarative_base

# All models inherit from this Base class
Base = declarative_base()


# Imported here so they are registered with Base.metadata
# (required for Alembic autogenerate to detect models)
from backend.src.models.event import Event, Recurrence

__all__ = [
    "Base",
    "Event",
    "Recurrence",
]
