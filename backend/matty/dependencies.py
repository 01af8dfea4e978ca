"""Singletons handed to the routers through FastAPI dependencies."""
from functools import lru_cache

from matty.config import settings
from matty.database import SessionLocal
from matty.schemas.user import User
from matty.services.data_store import DataStore
from matty.services.feed_controller import FeedController
from matty.services.interest_selection import InterestSelection
from matty.services.sql_store import SqlDataStore


@lru_cache
def get_data_store() -> DataStore:
    return SqlDataStore(SessionLocal, settings.CURRENT_USER_ID)


@lru_cache
def get_feed_controller() -> FeedController:
    return FeedController(get_data_store())


@lru_cache
def get_interest_selection() -> InterestSelection:
    return InterestSelection(get_data_store())


def get_current_user() -> User:
    return User(id=settings.CURRENT_USER_ID, name=settings.CURRENT_USER_ID)
