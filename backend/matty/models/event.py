"""Event ORM model."""
import uuid
from sqlalchemy import Column, String, Text, Boolean, Float, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from matty.database import Base


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    details = Column(Text, nullable=False, default="")
    interest_id = Column(String(36), ForeignKey("interests.interest_id"), nullable=False, index=True)
    location_name = Column(String(255), nullable=False, default="")
    location_address = Column(String(500), nullable=False, default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    start_time_utc = Column(DateTime(timezone=True), nullable=True)
    end_time_utc = Column(DateTime(timezone=True), nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    with_approval = Column(Boolean, nullable=False, default=False)
    creator_id = Column(String(36), ForeignKey("users.user_id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    interest = relationship("Interest", back_populates="events")
    creator = relationship("User")
    participants = relationship("EventParticipant", back_populates="event", cascade="all, delete-orphan")
