"""
SMS message templates
"""
import logging
import re
from datetime import datetime

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")

BOOKING_CONFIRMATION = (
    "Hi {customer_name}, your booking for {event_name} on {event_date} at {event_time} "
    "has been confirmed. You have reserved {seats} seat(s)."
)

REMINDER_CONFIRMATION = (
    "Hi {customer_name}, thanks for your interest in {event_name} on {event_date} "
    "at {event_time}. We'll send you a reminder closer to the day."
)

BOOKING_CANCELLATION = (
    "Hi {customer_name}, unfortunately {event_name} on {event_date} has been cancelled. "
    "We're sorry for any inconvenience."
)

REMINDER_7DAY = (
    "Hi {customer_name}, just a reminder that {event_name} is next {event_day_name} "
    "({event_date}) at {event_time}. You have {seats} seat(s) booked. See you there!"
)

REMINDER_24HR = (
    "Hi {customer_name}, just a reminder that {event_name} is tomorrow at {event_time}. "
    "You have {seats} seat(s) booked. See you tomorrow!"
)


def render_template(template: str, **values) -> str:
    """
    Fill {placeholder} slots in a template.

    Missing values render as an empty string. datetime values are formatted
    as a long UK date.
    """

    def _replace(match):
        key = match.group(1).strip()
        value = values.get(key)
        if value is None:
            logger.warning(f"Template placeholder {key} has no value")
            return ""
        if isinstance(value, datetime):
            return value.strftime("%A %d %B %Y")
        return str(value)

    return _PLACEHOLDER.sub(_replace, template)


def event_values(event, customer, booking=None) -> dict:
    """Common template values for a booking's event and customer"""
    start = event.start_time
    values = {
        "customer_name": customer.first_name,
        "event_name": event.title,
        "event_date": start.strftime("%d/%m/%Y"),
        "event_time": start.strftime("%H:%M"),
        "event_day_name": start.strftime("%A"),
    }
    if booking is not None:
        values["seats"] = booking.seats
    return values
