"""Interest taxonomy ORM models."""
import uuid
from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship
from matty.database import Base


class Interest(Base):
    __tablename__ = "interests"

    interest_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, unique=True)
    emoji = Column(String(16), nullable=True)

    events = relationship("Event", back_populates="interest")


class UserInterest(Base):
    """Interests a user follows; drives relevant-event ordering."""

    __tablename__ = "user_interests"

    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    interest_id = Column(String(36), ForeignKey("interests.interest_id"), primary_key=True)

    interest = relationship("Interest")
