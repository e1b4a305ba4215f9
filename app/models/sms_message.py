from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Boolean, func
from sqlalchemy.orm import relationship
from app.database import Base


class SmsMessage(Base):
    """Audit log of every outbound send attempt and inbound reply"""
    __tablename__ = "sms_messages"

    id = Column(Integer, primary_key=True, index=True)
    # Not a foreign key: archived rows outlive the booking they were sent for
    booking_id = Column(Integer, nullable=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), nullable=True, index=True)
    direction = Column(String(20), default="outbound")  # "outbound" or "inbound"
    message_type = Column(String(50), nullable=False, index=True)
    recipient = Column(String(20), nullable=True)  # Sender's number for inbound rows
    content = Column(Text, nullable=False)
    status = Column(String(20), nullable=False)
    message_sid = Column(String(64), nullable=True, index=True)
    error_message = Column(Text, nullable=True)
    is_read = Column(Boolean, default=False)
    is_archived = Column(Boolean, default=False)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # Relationships
    customer = relationship("Customer")
