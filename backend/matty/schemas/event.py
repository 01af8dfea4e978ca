"""Pydantic domain model for events.

Events are immutable values. Local changes (e.g. an optimistic membership
update) are made with ``model_copy(update=...)``, and two events are equal
when their ids match, whatever their other fields say.
"""
from __future__ import annotations
import enum
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, computed_field, field_validator

from matty.schemas.interest import Interest
from matty.schemas.user import User


class UserStatus(str, enum.Enum):
    owner = "owner"
    participant = "participant"
    none = "none"


class Coordinates(BaseModel):
    latitude: float
    longitude: float

    model_config = {"frozen": True}


class Location(BaseModel):
    name: str
    address: str = ""
    coordinates: Optional[Coordinates] = None

    model_config = {"frozen": True}


class Event(BaseModel):
    id: str
    name: str
    description: str = ""
    details: str = ""
    interest: Interest
    location: Location
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_public: bool = True
    with_approval: bool = False
    creator: User
    user_status: UserStatus = UserStatus.none
    participants: tuple[User, ...] = ()
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @field_validator("start_date", "end_date", "created_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive datetimes; everything stored is UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Event):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def date(self) -> Optional[datetime]:
        """The date the event is scheduled for, if it has one."""
        return self.start_date

    @computed_field
    @property
    def past(self) -> bool:
        end = self.end_date or self.start_date
        return end is not None and end < datetime.now(timezone.utc)

    @computed_field
    @property
    def started(self) -> bool:
        return self.start_date is not None and self.start_date < datetime.now(timezone.utc)
