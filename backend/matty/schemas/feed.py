"""Pydantic schemas for the feed API."""
from __future__ import annotations
import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, model_validator

from matty.schemas.event import Event, Location
from matty.schemas.interest import Interest, SelectableInterest
from matty.schemas.user import User


class SearchTextIn(BaseModel):
    text: str = ""


class EventCreate(BaseModel):
    name: str
    description: str = ""
    details: str = ""
    interest: Interest
    location: Location
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_public: bool = True
    with_approval: bool = False

    @model_validator(mode="after")
    def _end_after_start(self) -> EventCreate:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    def to_event(self, creator: User) -> Event:
        return Event(id=str(uuid.uuid4()), creator=creator, **self.model_dump())


class MutationFailureOut(BaseModel):
    action: str
    event_id: str
    reason: str

    model_config = {"from_attributes": True}


class FeedStateOut(BaseModel):
    user_events: list[Event]
    relevant_events: list[Event]
    found_events: list[Event]
    suggested_interests: list[Interest]
    search_text: str
    search_in_progress: bool
    show_suggested_interests: bool
    show_relevant_events: bool
    show_found_events: bool
    no_suggested_interests: bool
    no_found_events: bool
    selected_event: Optional[Event] = None
    load_errors: dict[str, str] = {}
    last_mutation_failure: Optional[MutationFailureOut] = None

    model_config = {"from_attributes": True}


class TimeBadgeOut(BaseModel):
    event_id: str
    label: str
    style: str
    date: str


class InterestSelectionOut(BaseModel):
    interests: list[SelectableInterest]
    no_interests: bool

    model_config = {"from_attributes": True}
