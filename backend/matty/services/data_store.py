"""Abstract Data Store the feed controller talks to.

Implementations own the canonical records and answer every call with a
:class:`~matty.services.results.StoreResult`; transport and decoding errors
are turned into ``StoreResult.failed`` at this boundary.
"""
from abc import ABC, abstractmethod

from matty.schemas.event import Event
from matty.schemas.interest import Interest
from matty.services.results import StoreResult


class DataStore(ABC):
    """Async CRUD façade over the event/interest records of one user."""

    @abstractmethod
    async def fetch_all_interests(self) -> StoreResult[Interest]:
        """The full interest taxonomy."""

    @abstractmethod
    async def fetch_user_interests(self) -> StoreResult[Interest]:
        """Interests the current user follows."""

    @abstractmethod
    async def fetch_user_events(self) -> StoreResult[Event]:
        """Events the current user owns or participates in."""

    @abstractmethod
    async def fetch_relevant_events(self) -> StoreResult[Event]:
        """Events recommended to the current user."""

    @abstractmethod
    async def fetch_events(self, interest: Interest) -> StoreResult[Event]:
        """Public events tagged with ``interest``."""

    @abstractmethod
    async def join(self, event: Event) -> StoreResult[None]:
        """Add the current user to the event's participants."""

    @abstractmethod
    async def leave(self, event: Event) -> StoreResult[None]:
        """Remove the current user from the event's participants."""

    @abstractmethod
    async def add(self, event: Event) -> StoreResult[None]:
        """Create a new event owned by the current user."""
