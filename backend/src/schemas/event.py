"""
Pydantic schemas for event API request/response validation.

Provides data validation and serialization for:
- Event create/replace payloads (one schema, full replacement semantics)
- Event API responses

Design:
- JSON uses camelCase (groupId); snake_case names are accepted on input
- Recurrence is parsed case-insensitively into the Recurrence enum
- Timestamps are naive local values; a timezone suffix on input is dropped
- Identifiers are GUIDs (evt_xxx, ser_xxx), never internal IDs
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from backend.src.models.event import Recurrence


TITLE_MAX_LENGTH = 100
TEXT_MAX_LENGTH = 500
# Matches the events.group_id column
GROUP_ID_MAX_LENGTH = 30


class EventPayload(BaseModel):
    """
    Schema for creating or fully replacing an event.

    Required:
        title: Event title (1-100 characters after trimming, not blank)
        start: Start timestamp
        end: End timestamp (must be after start)

    Optional:
        id: Ignored on create; overridden by the path id on replace
        color: Display color
        location: Location text (max 500 characters)
        description: Description text (max 500 characters)
        recurrence: none, daily, weekly, monthly or yearly (any case)
        notification: Reminder lead time in minutes
        groupId: Series identifier (max 30 characters), kept as sent on replace
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Standup",
                "start": "2024-01-01T09:00",
                "end": "2024-01-01T09:15",
                "color": "#3B82F6",
                "recurrence": "daily",
                "notification": 10,
            }
        },
    )

    id: Optional[str] = Field(default=None)
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    start: datetime
    end: datetime
    color: Optional[str] = Field(default=None)
    location: Optional[str] = Field(default=None, max_length=TEXT_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=TEXT_MAX_LENGTH)
    recurrence: Optional[Recurrence] = Field(default=None)
    notification: Optional[int] = Field(default=None)
    group_id: Optional[str] = Field(default=None, max_length=GROUP_ID_MAX_LENGTH)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        """Trim the title before length checks; a blank title becomes empty and fails min_length."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("start", "end")
    @classmethod
    def drop_timezone(cls, v: datetime) -> datetime:
        """Keep timestamps naive; an explicit offset is discarded, not converted."""
        return v.replace(tzinfo=None)

    @field_validator("recurrence", mode="before")
    @classmethod
    def parse_recurrence(cls, v):
        """Parse recurrence case-insensitively; null stays null."""
        if v is None or isinstance(v, Recurrence):
            return v
        if not isinstance(v, str):
            raise ValueError("Recurrence must be a string")
        try:
            return Recurrence.parse(v)
        except ValueError:
            allowed = ", ".join(r.value for r in Recurrence)
            raise ValueError(f"Unknown recurrence '{v}'. Allowed: {allowed}")

    @model_validator(mode="after")
    def validate_time_range(self) -> "EventPayload":
        """Ensure the event ends after it starts."""
        if self.start >= self.end:
            raise ValueError("End must be after start")
        return self

    @model_validator(mode="after")
    def validate_series_range(self) -> "EventPayload":
        """Ensure every occurrence of the series is a representable timestamp."""
        from backend.src.services.recurrence import advance, occurrence_cap

        if self.recurrence is None or not self.recurrence.is_recurring:
            return self

        last = occurrence_cap(self.recurrence) - 1
        try:
            advance(self.end, self.recurrence, last)
        except (ValueError, OverflowError):
            raise ValueError(
                f"A {self.recurrence.value} series starting {self.start.isoformat()} "
                f"extends past the supported date range"
            )
        return self


class EventResponse(BaseModel):
    """
    Schema for an event in API responses.

    Null fields are omitted by the router (response_model_exclude_none).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Event GUID (evt_xxx)")
    title: str
    start: datetime
    end: datetime
    color: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    recurrence: Optional[Recurrence] = None
    notification: Optional[int] = None
    group_id: Optional[str] = Field(default=None, description="Series GUID (ser_xxx)")
