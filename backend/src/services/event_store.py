"""
Event store: persistence collaborator of the event service.

Defines the document-collection style interface the event service writes
through, and its SQLAlchemy implementation.

Atomicity contract:
- Single-event operations (insert_one, replace_by_id, delete_by_id) are atomic
- Multi-event operations (insert_many, delete_by_group_id) are best-effort
  unless wrapped in atomic() by a store that supports transactions
- atomic() groups several operations into one unit of work; the base
  implementation provides no grouping

Design Pattern: Strategy pattern for pluggable storage backends
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from backend.src.models import Event
from backend.src.services.guid import GuidService
from backend.src.utils.logging_config import get_logger


logger = get_logger("db")


class EventStore(ABC):
    """
    Abstract collection of Event documents keyed by their GUID.

    Methods:
        find_all(): All events
        find_by_id(): One event or None
        insert_one() / insert_many(): Persist new events, assigning ids
        replace_by_id(): Full replacement, returns matched count
        delete_by_id() / delete_by_group_id(): Returns deleted count
        atomic(): Unit of work around several writes
    """

    @abstractmethod
    def find_all(self) -> List[Event]:
        """Return every stored event."""

    @abstractmethod
    def find_by_id(self, event_id: str) -> Optional[Event]:
        """Return the event with this GUID, or None (also for malformed ids)."""

    @abstractmethod
    def insert_one(self, event: Event) -> Event:
        """Persist a new event and assign its id."""

    @abstractmethod
    def insert_many(self, events: List[Event]) -> List[Event]:
        """Persist new events in one batch and assign their ids."""

    @abstractmethod
    def replace_by_id(self, event_id: str, replacement: Event) -> int:
        """Overwrite every content field of the event; return matched count."""

    @abstractmethod
    def delete_by_id(self, event_id: str) -> int:
        """Delete one event; return deleted count."""

    @abstractmethod
    def delete_by_group_id(self, group_id: str) -> int:
        """Delete every event of a series; return deleted count."""

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """
        Group the enclosed operations into one unit of work.

        The base implementation provides no grouping: a failure part way
        through leaves earlier writes in place.
        """
        yield


class SqlAlchemyEventStore(EventStore):
    """
    Event store backed by the events table.

    Operations flush but never commit on their own; atomic() commits on
    success and rolls back on failure, which makes series creation and
    promotion all-or-nothing.

    Usage:
        >>> store = SqlAlchemyEventStore(db_session)
        >>> with store.atomic():
        ...     store.insert_many(occurrences)
        ...     store.replace_by_id(event_id, replacement)
    """

    def __init__(self, db: Session):
        """
        Initialize the store.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def find_all(self) -> List[Event]:
        return self.db.query(Event).order_by(Event.start.asc(), Event.id.asc()).all()

    def find_by_id(self, event_id: str) -> Optional[Event]:
        if not GuidService.validate_guid(event_id, "evt"):
            return None

        try:
            uuid_value = Event.parse_guid(event_id)
        except ValueError:
            return None

        return self.db.query(Event).filter(Event.uuid == uuid_value).first()

    def insert_one(self, event: Event) -> Event:
        self.db.add(event)
        self.db.flush()
        return event

    def insert_many(self, events: List[Event]) -> List[Event]:
        self.db.add_all(events)
        self.db.flush()
        return events

    def replace_by_id(self, event_id: str, replacement: Event) -> int:
        existing = self.find_by_id(event_id)
        if existing is None:
            return 0

        for field in Event.CONTENT_FIELDS:
            setattr(existing, field, getattr(replacement, field))

        self.db.flush()
        return 1

    def delete_by_id(self, event_id: str) -> int:
        existing = self.find_by_id(event_id)
        if existing is None:
            return 0

        self.db.delete(existing)
        self.db.flush()
        return 1

    def delete_by_group_id(self, group_id: str) -> int:
        if not group_id:
            return 0

        deleted = (
            self.db.query(Event)
            .filter(Event.group_id == group_id)
            .delete(synchronize_session="fetch")
        )
        self.db.flush()
        return deleted

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Commit the enclosed operations together, or roll all of them back."""
        try:
            yield
            self.db.commit()
        except Exception:
            logger.warning("Rolling back event store transaction", exc_info=True)
            self.db.rollback()
            raise
