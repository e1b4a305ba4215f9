from app.models.customer import Customer
from app.models.event import Event, EventCategory
from app.models.booking import Booking
from app.models.sms_message import SmsMessage

__all__ = ["Customer", "Event", "EventCategory", "Booking", "SmsMessage"]
