"""SQLAlchemy-backed Data Store.

Responsibilities:
- Map ORM rows to domain events, deriving ``user_status`` for the current user
- Recommendation query for relevant events
- Idempotent membership mutations
- Turn database and row-mapping errors into ``StoreResult.failed`` so nothing
  leaks upward
- Skip event rows whose interest or creator row is missing

Sessions are synchronous; each call opens its own session inside a worker
thread so the event loop is never blocked.
"""
import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from matty.models.event import Event as EventRow
from matty.models.interest import Interest as InterestRow, UserInterest
from matty.models.participant import EventParticipant
from matty.models.user import User as UserRow
from matty.schemas.event import Coordinates, Event, Location, UserStatus
from matty.schemas.interest import Interest
from matty.schemas.user import User
from matty.services.data_store import DataStore
from matty.services.ordering import by_date
from matty.services.results import StoreResult

logger = logging.getLogger(__name__)


def _interest(row: InterestRow) -> Interest:
    return Interest(name=row.name, emoji=row.emoji or "")


def _user(row: UserRow) -> User:
    return User(id=row.user_id, name=row.display_name)


def _event(row: EventRow, current_user_id: str) -> Event:
    """Map an event row (with interest, creator and participants loaded)."""
    participant_ids = {p.user_id for p in row.participants}
    if row.creator_id == current_user_id:
        user_status = UserStatus.owner
    elif current_user_id in participant_ids:
        user_status = UserStatus.participant
    else:
        user_status = UserStatus.none

    coordinates = None
    if row.latitude is not None and row.longitude is not None:
        coordinates = Coordinates(latitude=row.latitude, longitude=row.longitude)

    return Event(
        id=row.event_id,
        name=row.name,
        description=row.description,
        details=row.details,
        interest=_interest(row.interest),
        location=Location(name=row.location_name, address=row.location_address, coordinates=coordinates),
        start_date=row.start_time_utc,
        end_date=row.end_time_utc,
        is_public=row.is_public,
        with_approval=row.with_approval,
        creator=_user(row.creator),
        user_status=user_status,
        participants=tuple(_user(p.user) for p in row.participants if p.user is not None),
        created_at=row.created_at,
    )


class SqlDataStore(DataStore):
    """Data Store over the ``events`` / ``interests`` tables for one user."""

    def __init__(self, session_factory: Callable[[], Session], current_user_id: str):
        self._session_factory = session_factory
        self.current_user_id = current_user_id

    async def _run(self, operation: str, work: Callable[[Session], StoreResult]) -> StoreResult:
        def _in_session() -> StoreResult:
            with self._session_factory() as db:
                try:
                    return work(db)
                except SQLAlchemyError as exc:
                    db.rollback()
                    logger.exception("Data store operation %s failed", operation)
                    return StoreResult.failed(f"{operation} failed: {exc.__class__.__name__}")
                except (ValidationError, AttributeError) as exc:
                    logger.exception("Data store operation %s could not map a row", operation)
                    return StoreResult.failed(f"{operation} failed: {exc.__class__.__name__}")

        return await asyncio.to_thread(_in_session)

    def _events_query(self, db: Session):
        return db.query(EventRow).options(
            selectinload(EventRow.interest),
            selectinload(EventRow.creator),
            selectinload(EventRow.participants).selectinload(EventParticipant.user),
        )

    def _events(self, rows: list[EventRow]) -> list[Event]:
        events = []
        for row in rows:
            if row.interest is None or row.creator is None:
                logger.warning("Skipping event %s: interest or creator row is missing", row.event_id)
                continue
            events.append(_event(row, self.current_user_id))
        return events

    # ── Reads ──────────────────────────────────────────────────────────

    async def fetch_all_interests(self) -> StoreResult[Interest]:
        def work(db: Session) -> StoreResult:
            rows = db.query(InterestRow).order_by(InterestRow.name).all()
            return StoreResult.of(_interest(row) for row in rows)

        return await self._run("fetch_all_interests", work)

    async def fetch_user_interests(self) -> StoreResult[Interest]:
        def work(db: Session) -> StoreResult:
            rows = (
                db.query(InterestRow)
                .join(UserInterest, UserInterest.interest_id == InterestRow.interest_id)
                .filter(UserInterest.user_id == self.current_user_id)
                .order_by(InterestRow.name)
                .all()
            )
            return StoreResult.of(_interest(row) for row in rows)

        return await self._run("fetch_user_interests", work)

    async def fetch_user_events(self) -> StoreResult[Event]:
        def work(db: Session) -> StoreResult:
            joined = select(EventParticipant.event_id).where(EventParticipant.user_id == self.current_user_id)
            rows = (
                self._events_query(db)
                .filter(or_(EventRow.creator_id == self.current_user_id, EventRow.event_id.in_(joined)))
                .all()
            )
            return StoreResult.of(self._events(rows))

        return await self._run("fetch_user_events", work)

    async def fetch_relevant_events(self) -> StoreResult[Event]:
        """Public events the user is not part of yet, followed interests first."""
        def work(db: Session) -> StoreResult:
            followed = {
                name
                for (name,) in db.query(InterestRow.name)
                .join(UserInterest, UserInterest.interest_id == InterestRow.interest_id)
                .filter(UserInterest.user_id == self.current_user_id)
            }
            now = datetime.now(timezone.utc)
            joined = select(EventParticipant.event_id).where(EventParticipant.user_id == self.current_user_id)
            # end date, falling back to the start date; undated events are never past
            not_past = or_(
                EventRow.end_time_utc >= now,
                and_(
                    EventRow.end_time_utc.is_(None),
                    or_(EventRow.start_time_utc.is_(None), EventRow.start_time_utc >= now),
                ),
            )
            rows = (
                self._events_query(db)
                .filter(
                    EventRow.is_public.is_(True),
                    EventRow.creator_id != self.current_user_id,
                    EventRow.event_id.not_in(joined),
                    not_past,
                )
                .all()
            )
            events = self._events(rows)
            events.sort(key=lambda event: (
                event.interest.name not in followed,
                by_date(event, now),
            ))
            return StoreResult.of(events)

        return await self._run("fetch_relevant_events", work)

    async def fetch_events(self, interest: Interest) -> StoreResult[Event]:
        def work(db: Session) -> StoreResult:
            rows = (
                self._events_query(db)
                .join(InterestRow, EventRow.interest_id == InterestRow.interest_id)
                .filter(InterestRow.name == interest.name, EventRow.is_public.is_(True))
                .all()
            )
            now = datetime.now(timezone.utc)
            return StoreResult.of(sorted(self._events(rows), key=lambda e: by_date(e, now)))

        return await self._run("fetch_events", work)

    # ── Mutations ──────────────────────────────────────────────────────

    def _find_event(self, db: Session, event_id: str) -> Optional[EventRow]:
        return db.query(EventRow).filter(EventRow.event_id == event_id).first()

    async def join(self, event: Event) -> StoreResult[None]:
        def work(db: Session) -> StoreResult:
            if self._find_event(db, event.id) is None:
                return StoreResult.failed(f"Event {event.id} not found")
            existing = db.get(EventParticipant, (event.id, self.current_user_id))
            if existing is None:
                db.add(EventParticipant(event_id=event.id, user_id=self.current_user_id))
                db.commit()
            logger.info("User %s joined event %s", self.current_user_id, event.id)
            return StoreResult.done()

        return await self._run("join", work)

    async def leave(self, event: Event) -> StoreResult[None]:
        def work(db: Session) -> StoreResult:
            if self._find_event(db, event.id) is None:
                return StoreResult.failed(f"Event {event.id} not found")
            existing = db.get(EventParticipant, (event.id, self.current_user_id))
            if existing is not None:
                db.delete(existing)
                db.commit()
            logger.info("User %s left event %s", self.current_user_id, event.id)
            return StoreResult.done()

        return await self._run("leave", work)

    async def add(self, event: Event) -> StoreResult[None]:
        def work(db: Session) -> StoreResult:
            interest = db.query(InterestRow).filter(InterestRow.name == event.interest.name).first()
            if interest is None:
                return StoreResult.failed(f"Unknown interest: {event.interest.name}")
            coordinates = event.location.coordinates
            row = EventRow(
                event_id=event.id or str(uuid.uuid4()),
                name=event.name,
                description=event.description,
                details=event.details,
                interest_id=interest.interest_id,
                location_name=event.location.name,
                location_address=event.location.address,
                latitude=coordinates.latitude if coordinates else None,
                longitude=coordinates.longitude if coordinates else None,
                start_time_utc=event.start_date,
                end_time_utc=event.end_date,
                is_public=event.is_public,
                with_approval=event.with_approval,
                creator_id=self.current_user_id,
            )
            db.add(row)
            db.commit()
            logger.info("Created event '%s' (%s) by %s", event.name, row.event_id, self.current_user_id)
            return StoreResult.done()

        return await self._run("add", work)
