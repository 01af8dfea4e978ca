"""In-process Data Store, used for development and tests."""
import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from matty.schemas.event import Event, UserStatus
from matty.schemas.interest import Interest
from matty.schemas.user import User
from matty.services.data_store import DataStore
from matty.services.ordering import by_date
from matty.services.results import StoreResult

logger = logging.getLogger(__name__)


class InMemoryDataStore(DataStore):
    """Keeps interests and events in dictionaries keyed by name / id.

    Stored events carry their creator and participants; ``user_status`` is
    recomputed for ``current_user`` on every read, the same way a remote
    store derives it from membership.
    """

    def __init__(
        self,
        current_user: User,
        interests: Iterable[Interest] = (),
        events: Iterable[Event] = (),
        user_interests: Iterable[Interest] = (),
    ):
        self.current_user = current_user
        self._interests: dict[str, Interest] = {i.name: i for i in interests}
        self._events: dict[str, Event] = {e.id: e for e in events}
        self._user_interests: list[Interest] = list(user_interests)

    def _status_of(self, event: Event) -> UserStatus:
        if event.creator == self.current_user:
            return UserStatus.owner
        if self.current_user in event.participants:
            return UserStatus.participant
        return UserStatus.none

    def _view(self, event: Event) -> Event:
        return event.model_copy(update={"user_status": self._status_of(event)})

    def _views(self, events: Iterable[Event]) -> list[Event]:
        return [self._view(e) for e in events]

    async def fetch_all_interests(self) -> StoreResult[Interest]:
        return StoreResult.of(self._interests.values())

    async def fetch_user_interests(self) -> StoreResult[Interest]:
        return StoreResult.of(self._user_interests)

    async def fetch_user_events(self) -> StoreResult[Event]:
        mine = [e for e in self._views(self._events.values()) if e.user_status != UserStatus.none]
        return StoreResult.of(mine)

    async def fetch_relevant_events(self) -> StoreResult[Event]:
        now = datetime.now(timezone.utc)
        followed = set(self._user_interests)
        candidates = [
            e for e in self._views(self._events.values())
            if e.is_public and not e.past and e.user_status == UserStatus.none
        ]
        candidates.sort(key=lambda e: (e.interest not in followed, by_date(e, now)))
        return StoreResult.of(candidates)

    async def fetch_events(self, interest: Interest) -> StoreResult[Event]:
        now = datetime.now(timezone.utc)
        found = [e for e in self._views(self._events.values()) if e.is_public and e.interest == interest]
        found.sort(key=lambda e: by_date(e, now))
        return StoreResult.of(found)

    async def join(self, event: Event) -> StoreResult[None]:
        stored = self._lookup(event)
        if stored is None:
            return StoreResult.failed(f"Event {event.id} not found")
        if self.current_user not in stored.participants:
            self._events[stored.id] = stored.model_copy(
                update={"participants": stored.participants + (self.current_user,)}
            )
        logger.info("User %s joined event %s", self.current_user.id, event.id)
        return StoreResult.done()

    async def leave(self, event: Event) -> StoreResult[None]:
        stored = self._lookup(event)
        if stored is None:
            return StoreResult.failed(f"Event {event.id} not found")
        remaining = tuple(u for u in stored.participants if u != self.current_user)
        self._events[stored.id] = stored.model_copy(update={"participants": remaining})
        logger.info("User %s left event %s", self.current_user.id, event.id)
        return StoreResult.done()

    async def add(self, event: Event) -> StoreResult[None]:
        if event.interest.name not in self._interests:
            return StoreResult.failed(f"Unknown interest: {event.interest.name}")
        self._events[event.id] = event.model_copy(
            update={"creator": self.current_user, "interest": self._interests[event.interest.name]}
        )
        logger.info("Added event '%s' (%s)", event.name, event.id)
        return StoreResult.done()

    def _lookup(self, event: Event) -> Optional[Event]:
        return self._events.get(event.id)
