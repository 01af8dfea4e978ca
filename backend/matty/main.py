"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from matty.config import settings
from matty.database import Base, SessionLocal, engine

# Import routers
from matty.routers import feed, interests

# Import all models so Base.metadata knows about them
from matty.models.user import User
from matty.models.interest import Interest, UserInterest  # noqa: F401
from matty.models.event import Event                        # noqa: F401
from matty.models.participant import EventParticipant        # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _create_dev_database():
    """Create tables and the current user (for SQLite dev mode)."""
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        if db.get(User, settings.CURRENT_USER_ID) is None:
            db.add(User(user_id=settings.CURRENT_USER_ID, display_name=settings.CURRENT_USER_ID))
            db.commit()
            logger.info("Created user %s", settings.CURRENT_USER_ID)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DATABASE_URL.startswith("sqlite"):
        _create_dev_database()
    yield


app = FastAPI(
    title="Matty",
    description="Discover, join and create local events around shared interests",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(feed.router, prefix="/api/feed", tags=["Feed"])
app.include_router(interests.router, prefix="/api/interests", tags=["Interests"])


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
