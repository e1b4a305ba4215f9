from sqlalchemy import Column, Integer, DateTime, Text, func, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Booking(Base):
    """A customer's reservation against an event"""
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    seats = Column(Integer, nullable=False, default=1)
    reminder_only = Column(Boolean, default=False)  # Customer asked for a reminder, not a seat
    notes = Column(Text, nullable=True)
    send_notification = Column(Boolean, default=True)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    customer = relationship("Customer", back_populates="bookings")
    event = relationship("Event", back_populates="bookings")

    @property
    def seats_or_reminder(self) -> str:
        return str(self.seats)
