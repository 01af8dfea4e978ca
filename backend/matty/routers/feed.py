"""Feed API routes, thin wrappers around the FeedController."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from matty.config import settings
from matty.dependencies import get_current_user, get_feed_controller
from matty.schemas.event import Event
from matty.schemas.feed import EventCreate, FeedStateOut, SearchTextIn, TimeBadgeOut
from matty.schemas.interest import Interest
from matty.schemas.user import User
from matty.services.feed_controller import FeedController
from matty.services.time_badge import badge_style, format_event_date, time_until

logger = logging.getLogger(__name__)
router = APIRouter()


def _state(feed: FeedController) -> FeedStateOut:
    return FeedStateOut.model_validate(feed)


def _find_event(feed: FeedController, event_id: str) -> Event:
    """Look an event up in whatever the feed currently shows."""
    candidates = [feed.selected_event] if feed.selected_event else []
    candidates += feed.user_events + feed.relevant_events + feed.found_events
    for event in candidates:
        if event.id == event_id:
            return event
    raise HTTPException(status_code=404, detail="Event not found")


def _raise_mutation_failure(feed: FeedController) -> None:
    failure = feed.last_mutation_failure
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": f"Could not {failure.action} event",
            "event_id": failure.event_id,
            "reason": failure.reason,
        },
    )


@router.get("/", response_model=FeedStateOut)
async def get_feed(feed: FeedController = Depends(get_feed_controller)):
    """Current feed state, including the derived view flags."""
    return _state(feed)


@router.post("/refresh", response_model=FeedStateOut)
async def refresh_feed(feed: FeedController = Depends(get_feed_controller)):
    """Reload interests, the user's events and relevant events."""
    await feed.refresh()
    return _state(feed)


@router.put("/search-text", response_model=FeedStateOut)
async def update_search_text(payload: SearchTextIn, feed: FeedController = Depends(get_feed_controller)):
    """Update the search box and the interest suggestions."""
    feed.update_search_text(payload.text)
    return _state(feed)


@router.post("/search", response_model=FeedStateOut)
async def search_events(interest: Interest, feed: FeedController = Depends(get_feed_controller)):
    """Search public events tagged with an interest."""
    await feed.search_events(interest)
    return _state(feed)


@router.post("/events", response_model=FeedStateOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    feed: FeedController = Depends(get_feed_controller),
    user: User = Depends(get_current_user),
):
    """Create an event owned by the current user and reload the user's events."""
    if not await feed.create_event(payload.to_event(user)):
        _raise_mutation_failure(feed)
    return _state(feed)


@router.post("/events/{event_id}/select", response_model=FeedStateOut)
async def select_event(event_id: str, feed: FeedController = Depends(get_feed_controller)):
    feed.select_event(_find_event(feed, event_id))
    return _state(feed)


@router.delete("/selection", response_model=FeedStateOut)
async def clear_selection(feed: FeedController = Depends(get_feed_controller)):
    feed.clear_selected_event()
    return _state(feed)


@router.post("/events/{event_id}/join", response_model=FeedStateOut)
async def join_event(event_id: str, feed: FeedController = Depends(get_feed_controller)):
    """Join an event; 409 if the store did not accept the membership change."""
    if not await feed.join_event(_find_event(feed, event_id)):
        _raise_mutation_failure(feed)
    return _state(feed)


@router.post("/events/{event_id}/leave", response_model=FeedStateOut)
async def leave_event(event_id: str, feed: FeedController = Depends(get_feed_controller)):
    """Leave an event; 409 if the store did not accept the membership change."""
    if not await feed.leave_event(_find_event(feed, event_id)):
        _raise_mutation_failure(feed)
    return _state(feed)


@router.get("/events/{event_id}/badge", response_model=TimeBadgeOut)
async def get_time_badge(
    event_id: str,
    tz: Optional[str] = Query(None, description="IANA timezone for the date label"),
    feed: FeedController = Depends(get_feed_controller),
):
    """Time-until label, urgency style and local date for an event card."""
    event = _find_event(feed, event_id)
    return TimeBadgeOut(
        event_id=event.id,
        label=time_until(event.date),
        style=badge_style(event.date).value,
        date=format_event_date(event.date, tz or settings.DEFAULT_TIMEZONE),
    )
