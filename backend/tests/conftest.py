"""Pytest fixtures: in-memory and SQLite-backed stores, feed controller, API client."""
import os

# Must be set before matty.config is imported anywhere.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from matty.database import Base, make_engine
from matty.dependencies import get_feed_controller, get_interest_selection
from matty.main import app
from matty.models.event import Event as EventRow
from matty.models.interest import Interest as InterestRow, UserInterest
from matty.models.participant import EventParticipant
from matty.models.user import User as UserRow
from matty.schemas.event import Event, Location
from matty.schemas.interest import Interest
from matty.schemas.user import User
from matty.services.feed_controller import FeedController
from matty.services.interest_selection import InterestSelection
from matty.services.memory_store import InMemoryDataStore
from matty.services.results import StoreResult
from matty.services.sql_store import SqlDataStore

DEV = User(id="dev", name="Dev")
OTHER = User(id="other", name="Other")

HIKING = Interest(name="Hiking", emoji="🥾")
CODING = Interest(name="Coding", emoji="💻")
CYCLING = Interest(name="Cycling", emoji="🚴")


def hours_from_now(hours: float) -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=hours)


class FlakyStore(InMemoryDataStore):
    """In-memory store whose operations can be told to fail.

    ``failures`` maps an operation name (``"join"``, ``"fetch_user_events"``…)
    to the reason it should fail with.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.failures: dict[str, str] = {}

    def _failure(self, operation: str) -> Optional[StoreResult]:
        reason = self.failures.get(operation)
        return StoreResult.failed(reason) if reason else None

    async def fetch_all_interests(self):
        return self._failure("fetch_all_interests") or await super().fetch_all_interests()

    async def fetch_user_events(self):
        return self._failure("fetch_user_events") or await super().fetch_user_events()

    async def fetch_relevant_events(self):
        return self._failure("fetch_relevant_events") or await super().fetch_relevant_events()

    async def fetch_events(self, interest):
        return self._failure("fetch_events") or await super().fetch_events(interest)

    async def join(self, event):
        return self._failure("join") or await super().join(event)

    async def leave(self, event):
        return self._failure("leave") or await super().leave(event)

    async def add(self, event):
        return self._failure("add") or await super().add(event)


@pytest.fixture
def make_event():
    """Factory for events dated ``hours`` from now (``None`` → undated)."""
    def _make(
        event_id: str,
        hours: Optional[float] = 24,
        duration_hours: float = 1,
        interest: Interest = HIKING,
        creator: User = OTHER,
        participants: tuple = (),
        is_public: bool = True,
    ) -> Event:
        start = end = None
        if hours is not None:
            start = hours_from_now(hours)
            end = start + timedelta(hours=duration_hours)
        return Event(
            id=event_id,
            name=f"Event {event_id}",
            interest=interest,
            location=Location(name="Park"),
            start_date=start,
            end_date=end,
            is_public=is_public,
            creator=creator,
            participants=participants,
        )
    return _make


@pytest.fixture
def store():
    """Flaky in-memory store for user ``dev`` with three interests."""
    return FlakyStore(current_user=DEV, interests=[HIKING, CODING, CYCLING])


@pytest.fixture
def feed(store):
    return FeedController(store)


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create a fresh SQLite database file for each test."""
    engine = make_engine(f"sqlite:///{tmp_path / 'matty.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def client(feed, store):
    """FastAPI TestClient with the controller dependencies bound to the in-memory store."""
    selection = InterestSelection(store)
    app.dependency_overrides[get_feed_controller] = lambda: feed
    app.dependency_overrides[get_interest_selection] = lambda: selection
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def seeded(session_factory):
    """SQL store for ``dev`` over users dev/other, three interests (dev follows Coding) and a handful of events."""
    with session_factory() as db:
        db.add_all([
            UserRow(user_id="dev", display_name="Dev"),
            UserRow(user_id="other", display_name="Other"),
            InterestRow(interest_id="i-hike", name="Hiking", emoji="🥾"),
            InterestRow(interest_id="i-code", name="Coding", emoji=None),
            InterestRow(interest_id="i-cycle", name="Cycling", emoji="🚴"),
            UserInterest(user_id="dev", interest_id="i-code"),
        ])
        db.flush()
        rows = [
            ("owned", "i-hike", "dev", 5, True),
            ("joined", "i-hike", "other", 10, True),
            ("hike-later", "i-hike", "other", 30, True),
            ("code-later", "i-code", "other", 40, True),
            ("hike-past", "i-hike", "other", -5, True),
            ("hike-private", "i-hike", "other", 3, False),
        ]
        for event_id, interest_id, creator_id, hours, is_public in rows:
            db.add(EventRow(
                event_id=event_id,
                name=event_id.title(),
                interest_id=interest_id,
                location_name="Park",
                start_time_utc=hours_from_now(hours),
                end_time_utc=hours_from_now(hours + 1),
                is_public=is_public,
                creator_id=creator_id,
            ))
        db.add(EventRow(
            event_id="undated", name="Undated", interest_id="i-cycle",
            location_name="Somewhere", creator_id="other",
        ))
        db.flush()
        db.add(EventParticipant(event_id="joined", user_id="dev"))
        db.commit()
    return SqlDataStore(session_factory, current_user_id="dev")
