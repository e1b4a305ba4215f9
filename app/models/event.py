from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, func
from sqlalchemy.orm import relationship
from app.database import Base


class EventCategory(Base):
    """Group events by type (quiz night, live music, ...)"""
    __tablename__ = "event_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    events = relationship("Event", back_populates="category")


class Event(Base):
    """Store venue events"""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    capacity = Column(Integer, nullable=True)  # None means unlimited
    category_id = Column(Integer, ForeignKey("event_categories.id"), nullable=True, index=True)
    is_published = Column(Boolean, default=True)
    is_canceled = Column(Boolean, default=False, index=True)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    category = relationship("EventCategory", back_populates="events")
    bookings = relationship("Booking", back_populates="event", cascade="all, delete-orphan")
