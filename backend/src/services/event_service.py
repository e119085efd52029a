"""
Event service for managing calendar events.

Provides business logic for listing, retrieving, creating, replacing, and
deleting calendar events, including materialization of recurring series.

Design:
- A recurring event is stored as one row per occurrence, all sharing a
  group_id (ser_xxx); the number of rows is capped per recurrence kind
- Adding a recurrence to a standalone event on update promotes it to a
  series: siblings are inserted first, then the event itself is replaced
- Changing the recurrence kind of an event that already recurs replaces
  only that row; siblings generated under the old kind are left as they are
- Not-found is a return value (None / False), never an exception
- Store failures propagate unchanged
"""

from typing import List, Optional

from backend.src.models import Event
from backend.src.schemas.event import EventPayload
from backend.src.services.event_store import EventStore
from backend.src.services.exceptions import NotFoundError
from backend.src.services.guid import GuidService
from backend.src.services.recurrence import generate_occurrences
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class EventService:
    """
    Service for managing calendar events and their series.

    Handles:
    - Listing and retrieving events
    - Creating standalone events and full series
    - Full replacement, including promotion to a series
    - Deleting one occurrence or a whole series

    Usage:
        >>> service = EventService(SqlAlchemyEventStore(db_session))
        >>> first = service.create(EventPayload(
        ...     title="Standup",
        ...     start=datetime(2024, 1, 1, 9, 0),
        ...     end=datetime(2024, 1, 1, 9, 15),
        ...     recurrence="daily",
        ... ))
    """

    def __init__(self, store: EventStore):
        """
        Initialize event service.

        Args:
            store: Event store the service reads from and writes through
        """
        self.store = store

    # =========================================================================
    # Read Operations
    # =========================================================================

    def list_all(self) -> List[Event]:
        """
        List every stored event.

        Returns:
            List of Event instances (no filtering, no pagination)
        """
        return self.store.find_all()

    def get_by_id(self, event_id: str) -> Optional[Event]:
        """
        Get an event by GUID.

        Args:
            event_id: Event GUID (evt_xxx format)

        Returns:
            Event instance, or None if no event has this id
        """
        return self.store.find_by_id(event_id)

    # =========================================================================
    # Create Operations
    # =========================================================================

    def create(self, payload: EventPayload) -> Event:
        """
        Create a standalone event or a whole series.

        Without recurrence (absent or "none") the payload is inserted as-is.
        With a recurrence, a fresh group_id is generated and the full series
        is inserted in one batch, the first occurrence at the payload's own
        start/end.

        Args:
            payload: Validated event payload (its id is ignored)

        Returns:
            The created event, or the first occurrence of the created series
        """
        event = self._build_event(payload)

        if not event.is_recurring:
            with self.store.atomic():
                self.store.insert_one(event)
            logger.info(f"Created event: {event.guid} - {event.title}")
            return event

        group_id = GuidService.generate_guid("ser")
        event.group_id = group_id
        occurrences = generate_occurrences(event, group_id, start_index=0)

        with self.store.atomic():
            self.store.insert_many(occurrences)

        first = occurrences[0]
        logger.info(
            f"Created event series: {group_id} - {first.title} "
            f"({len(occurrences)} {event.recurrence} events)"
        )
        return first

    # =========================================================================
    # Update Operations
    # =========================================================================

    def update(self, event_id: str, payload: EventPayload) -> bool:
        """
        Replace an event in full.

        If the stored event has no recurrence and the payload adds one, the
        event is promoted to a series: it gets a fresh group_id and the
        remaining occurrences (offset 1 onwards) are inserted before the
        replace. If the insert fails, the stored event is left untouched.

        Args:
            event_id: Event GUID (evt_xxx); overrides any id in the payload
            payload: Validated replacement payload

        Returns:
            True if the event was replaced, False if it does not exist
            (including when it disappears between the read and the replace)
        """
        current = self.store.find_by_id(event_id)
        if current is None:
            logger.info(f"Event not found for update: {event_id}")
            return False

        replacement = self._build_event(payload)
        previous_kind = current.recurrence_kind
        previous_group_id = current.group_id
        was_recurring = previous_kind.is_recurring
        will_be_recurring = replacement.is_recurring

        try:
            with self.store.atomic():
                if not was_recurring and will_be_recurring:
                    self._promote_to_series(replacement)

                matched = self.store.replace_by_id(event_id, replacement)
                if matched == 0:
                    raise NotFoundError("Event", event_id)
        except NotFoundError:
            logger.warning(f"Event {event_id} was deleted before it could be replaced")
            return False

        if was_recurring and will_be_recurring and previous_kind != replacement.recurrence_kind:
            logger.info(
                f"Recurrence of {event_id} changed to {replacement.recurrence}; "
                f"other occurrences of {previous_group_id} keep their schedule"
            )

        logger.info(f"Updated event: {event_id}")
        return True

    def _promote_to_series(self, replacement: Event) -> None:
        """
        Turn the replacement of a standalone event into the first member of a new series.

        Assigns a fresh group_id to the replacement and inserts the
        occurrences after the first one.

        Args:
            replacement: Unsaved replacement event carrying the new recurrence
        """
        group_id = GuidService.generate_guid("ser")
        replacement.group_id = group_id

        siblings = generate_occurrences(replacement, group_id, start_index=1)
        if siblings:
            self.store.insert_many(siblings)

        logger.info(
            f"Promoted event to series {group_id} "
            f"({len(siblings)} new {replacement.recurrence} occurrences)"
        )

    # =========================================================================
    # Delete Operations
    # =========================================================================

    def delete_one(self, event_id: str) -> bool:
        """
        Delete exactly one event.

        Other members of its series, if any, are not touched.

        Args:
            event_id: Event GUID (evt_xxx)

        Returns:
            True if an event was deleted, False if it did not exist
        """
        with self.store.atomic():
            deleted = self.store.delete_by_id(event_id)

        if deleted == 0:
            logger.info(f"Event not found for deletion: {event_id}")
            return False

        logger.info(f"Deleted event: {event_id}")
        return True

    def delete_series(self, group_id: str) -> bool:
        """
        Delete every event of a series.

        Args:
            group_id: Series GUID (ser_xxx)

        Returns:
            True if at least one event was deleted, False otherwise
        """
        with self.store.atomic():
            deleted = self.store.delete_by_group_id(group_id)

        if deleted == 0:
            logger.info(f"Series not found for deletion: {group_id}")
            return False

        logger.info(f"Deleted event series: {group_id} ({deleted} events)")
        return True

    # =========================================================================
    # Helpers
    # =========================================================================

    def _build_event(self, payload: EventPayload) -> Event:
        """
        Build an unsaved Event from a validated payload.

        The payload id is never used; the store assigns ids on insert and
        replace targets the path id.

        Args:
            payload: Validated event payload

        Returns:
            Transient Event instance
        """
        return Event(
            title=payload.title,
            start=payload.start,
            end=payload.end,
            color=payload.color,
            location=payload.location,
            description=payload.description,
            recurrence=payload.recurrence.value if payload.recurrence else None,
            notification=payload.notification,
            group_id=payload.group_id,
        )

    def build_event_response(self, event: Event) -> dict:
        """
        Build the response dictionary for an event.

        Args:
            event: Stored Event instance

        Returns:
            Dictionary matching EventResponse fields
        """
        return {
            "id": event.guid,
            "title": event.title,
            "start": event.start,
            "end": event.end,
            "color": event.color,
            "location": event.location,
            "description": event.description,
            "recurrence": event.recurrence,
            "notification": event.notification,
            "group_id": event.group_id,
        }
