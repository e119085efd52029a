"""
Events API endpoints for managing calendar events.

Provides endpoints for:
- Listing all events
- Getting event details
- Creating standalone events and recurring series
- Replacing events (promoting to a series when a recurrence is added)
- Deleting a single event or a whole series

Design:
- Uses dependency injection for the service and its store
- Not-found outcomes from the service map to 404
- All endpoints use GUID format (evt_xxx, ser_xxx) for identifiers
- Null fields are omitted from responses
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.schemas.event import EventPayload, EventResponse
from backend.src.services.event_service import EventService
from backend.src.services.event_store import SqlAlchemyEventStore
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/events",
    tags=["Events"],
)


# ============================================================================
# Dependencies
# ============================================================================


def get_event_service(db: Session = Depends(get_db)) -> EventService:
    """Create EventService instance bound to a request-scoped store."""
    return EventService(store=SqlAlchemyEventStore(db))


# ============================================================================
# API Endpoints
# ============================================================================


@router.get(
    "",
    response_model=List[EventResponse],
    response_model_exclude_none=True,
    summary="List events",
    description="List every stored event",
)
async def list_events(
    event_service: EventService = Depends(get_event_service),
) -> List[EventResponse]:
    """
    List all events, including every occurrence of every series.

    Example:
        GET /api/events
    """
    events = event_service.list_all()

    logger.info(f"Listed {len(events)} events")

    return [
        EventResponse(**event_service.build_event_response(event))
        for event in events
    ]


@router.get(
    "/{guid}",
    response_model=EventResponse,
    response_model_exclude_none=True,
    summary="Get event by GUID",
)
async def get_event(
    guid: str,
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Get event details by GUID.

    Path Parameters:
        guid: Event GUID (evt_xxx format)

    Raises:
        404: Event not found

    Example:
        GET /api/events/evt_01hgw2bbg00000000000000001
    """
    event = event_service.get_by_id(guid)
    if event is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {guid} not found",
        )

    return EventResponse(**event_service.build_event_response(event))


@router.post(
    "",
    response_model=EventResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
    description="Create a standalone event, or a whole series when a recurrence is given",
)
async def create_event(
    event_data: EventPayload,
    request: Request,
    response: Response,
    event_service: EventService = Depends(get_event_service),
) -> EventResponse:
    """
    Create a new event.

    With a recurrence (daily, weekly, monthly, yearly) the whole series is
    created and its first occurrence is returned.

    Request Body:
        title: Event title (required, max 100)
        start: Start timestamp (required)
        end: End timestamp (required, after start)
        color, location, description, recurrence, notification: Optional

    Returns:
        Created event, or first occurrence of the series (201 Created)

    Raises:
        422: Validation error

    Example:
        POST /api/events
        {
          "title": "Standup",
          "start": "2024-01-01T09:00",
          "end": "2024-01-01T09:15",
          "recurrence": "daily"
        }
    """
    event = event_service.create(event_data)

    response.headers["Location"] = str(request.url_for("get_event", guid=event.guid))

    return EventResponse(**event_service.build_event_response(event))


@router.put(
    "/{guid}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace an event",
    description="Replace an event in full; adding a recurrence turns it into a series",
)
async def update_event(
    guid: str,
    event_data: EventPayload,
    event_service: EventService = Depends(get_event_service),
) -> Response:
    """
    Replace an event.

    The path GUID overrides any id in the body.

    Raises:
        404: Event not found

    Example:
        PUT /api/events/evt_xxx
    """
    if not event_service.update(guid, event_data):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {guid} not found",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/series/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an event series",
    description="Delete every event sharing the given series GUID",
)
async def delete_event_series(
    group_id: str,
    event_service: EventService = Depends(get_event_service),
) -> Response:
    """
    Delete a whole series.

    Path Parameters:
        group_id: Series GUID (ser_xxx format)

    Raises:
        404: No event belongs to this series

    Example:
        DELETE /api/events/series/ser_xxx
    """
    if not event_service.delete_series(group_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Series {group_id} not found",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{guid}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an event",
    description="Delete one event; other occurrences of its series are kept",
)
async def delete_event(
    guid: str,
    event_service: EventService = Depends(get_event_service),
) -> Response:
    """
    Delete a single event.

    Raises:
        404: Event not found

    Example:
        DELETE /api/events/evt_xxx
    """
    if not event_service.delete_one(guid):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Event {guid} not found",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
