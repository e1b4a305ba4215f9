from sqlalchemy import Column, Integer, String, DateTime, Text, func
from sqlalchemy.orm import relationship
from app.database import Base


class Customer(Base):
    """Store venue customers"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=True)
    mobile_number = Column(String(20), nullable=True, index=True)  # +447xxxxxxxxx
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=func.now())

    # Relationships
    bookings = relationship("Booking", back_populates="customer", cascade="all, delete-orphan")
