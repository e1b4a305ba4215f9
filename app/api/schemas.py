"""
Request and response models for the HTTP API
"""
from datetime import datetime
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CustomerRequest(BaseModel):
    first_name: str
    last_name: Optional[str] = None
    mobile_number: Optional[str] = None
    notes: Optional[str] = None


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: Optional[str] = None
    mobile_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class CategoryRequest(BaseModel):
    name: str
    description: Optional[str] = None


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class EventRequest(BaseModel):
    title: str
    description: Optional[str] = None
    start_time: datetime
    capacity: Optional[int] = None
    category_id: Optional[int] = None
    is_published: bool = True


class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    capacity: Optional[int] = None
    category_id: Optional[int] = None
    is_published: bool
    is_canceled: bool


class BookingRequest(BaseModel):
    """Loosely typed on purpose: seat counts arrive as "2" or 2 and are validated by the service"""

    customer_id: Union[int, str, None] = None
    event_id: Union[int, str, None] = None
    seats_or_reminder: Union[int, str, None] = None
    seats: Union[int, str, None] = None
    reminder_only: bool = False
    notes: Optional[str] = None
    send_notification: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("send_notification", "sendNotification")
    )


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    event_id: int
    seats: int
    seats_or_reminder: str
    reminder_only: bool
    notes: Optional[str] = None
    send_notification: bool
    created_at: Optional[datetime] = None
    customer: Optional[CustomerOut] = None
    event: Optional[EventOut] = None


class BookingResponse(BaseModel):
    success: bool = True
    message: str
    booking: BookingOut
    smsSent: bool


class SmsMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: Optional[int] = None
    customer_id: Optional[int] = None
    direction: str
    message_type: str
    recipient: Optional[str] = None
    content: str
    status: str
    message_sid: Optional[str] = None
    error_message: Optional[str] = None
    is_read: bool
    is_archived: bool
    created_at: Optional[datetime] = None


class ReminderRequest(BaseModel):
    reminder_type: str = Field(validation_alias=AliasChoices("reminder_type", "reminderType"))


class SendTestSmsRequest(BaseModel):
    to: str
    message: str = "Test message from Event Planner"


class CustomerSmsRequest(BaseModel):
    customer_id: int
    message: str
    booking_id: Optional[int] = None
