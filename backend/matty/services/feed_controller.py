"""Event feed controller: the state behind the feed screen.

Responsibilities:
- Load the user's events (upcoming first, past at the tail), relevant events
  and the interest taxonomy from an injected Data Store
- Interest-name suggestions for the search box
- Search events by interest
- Join / leave with an optimistic local update, reverted if the store refuses
- Reload the user's events after an event is created, edited or deleted

Every load takes a request id per published field, and so does every local
join or leave. A response is applied only while its id is still the latest
one issued for that field, so a slow response can never overwrite a newer
request or a local membership change.
"""
import asyncio
import itertools
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from matty.schemas.event import Event, UserStatus
from matty.schemas.interest import Interest
from matty.services.data_store import DataStore
from matty.services.ordering import upcoming_first
from matty.services.results import StoreResult

logger = logging.getLogger(__name__)

USER_EVENTS = "user_events"
RELEVANT_EVENTS = "relevant_events"
FOUND_EVENTS = "found_events"
ALL_INTERESTS = "all_interests"


@dataclass(frozen=True)
class MutationFailure:
    """A join/leave/create the store did not confirm."""

    action: str
    event_id: str
    reason: str


def _without(events: list[Event], event: Event) -> list[Event]:
    return [e for e in events if e != event]


def _index_of(events: list[Event], event: Event) -> Optional[int]:
    for index, candidate in enumerate(events):
        if candidate == event:
            return index
    return None


def _reinsert(events: list[Event], index: int, event: Event) -> list[Event]:
    restored = _without(events, event)
    restored.insert(min(index, len(restored)), event)
    return restored


class FeedController:
    """Feed state for one user, driven by a :class:`DataStore`."""

    def __init__(self, data_store: DataStore):
        self._data_store = data_store
        self._all_interests: list[Interest] = []
        self._request_ids = itertools.count(1)
        self._latest_request: dict[str, int] = {}

        self.user_events: list[Event] = []
        self.relevant_events: list[Event] = []
        self.found_events: list[Event] = []
        self.suggested_interests: list[Interest] = []
        self.search_text = ""
        self.show_suggested_interests = False
        self.search_in_progress = False
        self.selected_event: Optional[Event] = None
        self.load_errors: dict[str, str] = {}
        self.last_mutation_failure: Optional[MutationFailure] = None

    # ── Derived flags ──────────────────────────────────────────────────

    @property
    def show_relevant_events(self) -> bool:
        return not self.search_text

    @property
    def show_found_events(self) -> bool:
        return not self.show_relevant_events

    @property
    def no_suggested_interests(self) -> bool:
        return not self.suggested_interests

    @property
    def no_found_events(self) -> bool:
        return not self.found_events

    # ── Request sequencing ─────────────────────────────────────────────

    def _issue(self, field: str) -> int:
        request_id = next(self._request_ids)
        self._latest_request[field] = request_id
        return request_id

    def _supersede(self, *fields: str) -> None:
        """Discard in-flight loads of ``fields``; a local change is newer than they are."""
        for field in fields:
            self._issue(field)

    def _accept(self, field: str, request_id: int, result: StoreResult) -> Optional[list]:
        """Items to publish for ``field``, or None if a newer request was issued."""
        if self._latest_request.get(field) != request_id:
            logger.debug("Discarding stale %s response (request %d)", field, request_id)
            return None
        if result.ok:
            self.load_errors.pop(field, None)
        else:
            self.load_errors[field] = result.reason or "unknown error"
            logger.warning("Loading %s failed: %s", field, result.reason)
        return list(result.items)

    # ── Loads ──────────────────────────────────────────────────────────

    async def refresh(self) -> None:
        """Load interests, the user's events and relevant events together."""
        await asyncio.gather(
            self.load_all_interests(),
            self.load_user_events(),
            self.load_relevant_events(),
        )

    async def load_all_interests(self) -> None:
        request_id = self._issue(ALL_INTERESTS)
        result = await self._data_store.fetch_all_interests()
        interests = self._accept(ALL_INTERESTS, request_id, result)
        if interests is None:
            return
        self._all_interests = interests
        if self.search_text:
            self._search_interests()

    async def load_user_events(self) -> None:
        request_id = self._issue(USER_EVENTS)
        result = await self._data_store.fetch_user_events()
        events = self._accept(USER_EVENTS, request_id, result)
        if events is None:
            return
        self.user_events = upcoming_first(events, datetime.now(timezone.utc))
        logger.info("Loaded %d user events", len(self.user_events))

    async def load_relevant_events(self) -> None:
        request_id = self._issue(RELEVANT_EVENTS)
        result = await self._data_store.fetch_relevant_events()
        events = self._accept(RELEVANT_EVENTS, request_id, result)
        if events is None:
            return
        self.relevant_events = events
        logger.info("Loaded %d relevant events", len(self.relevant_events))

    # ── Search ─────────────────────────────────────────────────────────

    def update_search_text(self, text: str) -> None:
        self.search_text = text
        self._search_interests()
        self.show_suggested_interests = bool(text)

    def _search_interests(self) -> None:
        if not self.search_text:
            self.suggested_interests = []
            return
        needle = self.search_text.lower()
        self.suggested_interests = [i for i in self._all_interests if needle in i.name.lower()]

    async def search_events(self, interest: Interest) -> None:
        self.update_search_text(interest.name)
        self.show_suggested_interests = False
        self.found_events = []
        self.search_in_progress = True
        request_id = self._issue(FOUND_EVENTS)
        result = await self._data_store.fetch_events(interest)
        events = self._accept(FOUND_EVENTS, request_id, result)
        if events is None:
            return
        self.found_events = events
        self.search_in_progress = False
        logger.info("Found %d events for interest '%s'", len(events), interest.name)

    # ── Selection ──────────────────────────────────────────────────────

    def select_event(self, event: Event) -> None:
        self.selected_event = event

    def clear_selected_event(self) -> None:
        self.selected_event = None

    # ── Membership ─────────────────────────────────────────────────────

    def _fail(self, action: str, event: Event, result: StoreResult) -> None:
        self.last_mutation_failure = MutationFailure(action, event.id, result.reason or "unknown error")
        logger.warning("Could not %s event %s: %s", action, event.id, result.reason)

    async def join_event(self, event: Optional[Event] = None) -> bool:
        """Join ``event`` (default: the selected event); True once the store confirms."""
        event = event or self.selected_event
        if event is None:
            return False
        self.last_mutation_failure = None

        user_index = _index_of(self.user_events, event)
        previous_entry = self.user_events[user_index] if user_index is not None else None
        relevant_index = _index_of(self.relevant_events, event)
        previous_selected = self.selected_event

        self._supersede(USER_EVENTS, RELEVANT_EVENTS)
        joined = event.model_copy(update={"user_status": UserStatus.participant})
        self.user_events = _without(self.user_events, event) + [joined]
        self.relevant_events = _without(self.relevant_events, event)
        if self.selected_event == event:
            self.selected_event = joined

        result = await self._data_store.join(event)
        if result.ok:
            logger.info("Joined event %s", event.id)
            return True

        if previous_entry is None:
            self.user_events = _without(self.user_events, event)
        else:
            self.user_events = _reinsert(self.user_events, user_index, previous_entry)
        if relevant_index is not None:
            self.relevant_events = _reinsert(self.relevant_events, relevant_index, event)
        if self.selected_event == event:
            self.selected_event = previous_selected
        self._fail("join", event, result)
        return False

    async def leave_event(self, event: Optional[Event] = None) -> bool:
        """Leave ``event`` (default: the selected event); True once the store confirms."""
        event = event or self.selected_event
        if event is None:
            return False
        self.last_mutation_failure = None

        user_index = _index_of(self.user_events, event)
        previous_entry = self.user_events[user_index] if user_index is not None else None
        previous_selected = self.selected_event

        self._supersede(USER_EVENTS)
        self.user_events = _without(self.user_events, event)
        if self.selected_event == event:
            self.selected_event = self.selected_event.model_copy(update={"user_status": UserStatus.none})

        result = await self._data_store.leave(event)
        if result.ok:
            logger.info("Left event %s", event.id)
            return True

        if previous_entry is not None:
            self.user_events = _reinsert(self.user_events, user_index, previous_entry)
        if self.selected_event == event:
            self.selected_event = previous_selected
        self._fail("leave", event, result)
        return False

    # ── Event lifecycle ────────────────────────────────────────────────

    async def create_event(self, event: Event) -> bool:
        self.last_mutation_failure = None
        result = await self._data_store.add(event)
        if not result.ok:
            self._fail("create", event, result)
            return False
        await self.on_event_created()
        return True

    async def on_event_created(self) -> None:
        await self.load_user_events()

    async def on_event_edited(self, event: Event) -> None:
        self.selected_event = event
        await self.load_user_events()

    async def on_event_deleted(self) -> None:
        self.selected_event = None
        await self.load_user_events()
