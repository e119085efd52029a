"""
Event model for calendar events.

Events represent individual calendar entries. An event is either standalone
or one occurrence of a recurring series. A series is not stored as its own
table: it is the set of events sharing a group_id.

Design Rationale:
- Each occurrence of a series is a full row (materialized recurrence)
- Series members share every field except start/end
- Timestamps are naive local values (no timezone handling)
- group_id is an opaque GUID (ser_xxx) generated once per series
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, Index

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class Recurrence(str, enum.Enum):
    """
    Recurrence kind of an event.

    Parsing is case-insensitive ("Weekly" and "WEEKLY" are WEEKLY);
    NONE and a missing value both mean a standalone event.
    """
    NONE = "none"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None

    @classmethod
    def parse(cls, value: Optional[str]) -> "Recurrence":
        """
        Parse a raw recurrence value.

        Args:
            value: Raw value, None or empty for no recurrence

        Returns:
            Recurrence member

        Raises:
            ValueError: If the value is not a known recurrence kind
        """
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.NONE
        return cls(value)

    @property
    def is_recurring(self) -> bool:
        """True for every kind except NONE."""
        return self is not Recurrence.NONE


class Event(Base, GuidMixin):
    """
    Calendar event model.

    Attributes:
        id: Primary key (internal, never exposed)
        uuid: UUIDv7 for external identification (inherited from GuidMixin)
        guid: GUID string property (evt_xxx, inherited from GuidMixin)
        title: Event title (max 100 characters)
        start: Start timestamp (naive local time)
        end: End timestamp (naive local time)
        color: Display color
        location: Location text (max 500 characters)
        description: Description text (max 500 characters)
        recurrence: Recurrence kind value (none, daily, weekly, monthly, yearly)
        notification: Reminder lead time in minutes
        group_id: Series identifier shared by all occurrences (ser_xxx)
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Indexes:
        - uuid (unique, for GUID lookups)
        - group_id (for series deletion)
        - start_at (for ordered listing)
    """

    __tablename__ = "events"

    GUID_PREFIX = "evt"

    # Fields overwritten by a full replacement and copied to occurrences
    CONTENT_FIELDS = (
        "title",
        "start",
        "end",
        "color",
        "location",
        "description",
        "recurrence",
        "notification",
        "group_id",
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(100), nullable=False)
    start = Column("start_at", DateTime, nullable=False)
    end = Column("end_at", DateTime, nullable=False)

    color = Column(String, nullable=True)
    location = Column(String(500), nullable=True)
    description = Column(String(500), nullable=True)

    recurrence = Column(String(16), nullable=True)
    notification = Column(Integer, nullable=True)

    group_id = Column(String(30), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False
    )

    __table_args__ = (
        Index("ix_events_start_at", "start_at"),
    )

    @property
    def recurrence_kind(self) -> Recurrence:
        """Parsed recurrence of this event (NONE when unset)."""
        return Recurrence.parse(self.recurrence)

    @property
    def is_recurring(self) -> bool:
        """Check if this event carries a recurrence other than none."""
        return self.recurrence_kind.is_recurring

    def copy_content(self) -> "Event":
        """
        Build a new, unsaved event with the same content fields.

        Returns:
            Transient Event without id or uuid
        """
        return Event(**{field: getattr(self, field) for field in self.CONTENT_FIELDS})

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Event("
            f"id={self.id}, "
            f"title='{self.title}', "
            f"start={self.start}, "
            f"group_id={self.group_id}"
            f")>"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return f"{self.title} ({self.start})"
