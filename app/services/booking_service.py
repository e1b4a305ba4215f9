"""
Booking lifecycle: create, update and delete bookings and trigger
confirmation messages
"""
import logging
import re

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import BookingNotFoundError, BookingValidationError
from app.models import Booking, Customer, Event, SmsMessage
from app.services.sms_service import TwilioService, send_booking_confirmation

logger = logging.getLogger(__name__)


def _parse_id(value, field: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise BookingValidationError(
            "Missing required fields: customer_id and event_id are required"
        )
    if isinstance(value, bool):
        raise BookingValidationError(f"Invalid {field}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BookingValidationError(f"Invalid {field}: {value!r}")


def parse_seats(value) -> int:
    """Accept a positive integer, as a number or a string of digits"""
    if isinstance(value, bool):
        raise BookingValidationError("Seat count must be a positive integer")
    if isinstance(value, int):
        seats = value
    elif isinstance(value, str) and re.fullmatch(r"[0-9]+", value.strip()):
        seats = int(value.strip())
    else:
        raise BookingValidationError("Seat count must be a positive integer")
    if seats <= 0:
        raise BookingValidationError("Seat count must be a positive integer")
    return seats


def _seats_value(data: dict, required: bool):
    for key in ("seats", "seats_or_reminder"):
        if data.get(key) not in (None, ""):
            return data[key]
    if required:
        raise BookingValidationError("Missing required fields: seats_or_reminder is required")
    return 1


def _validate(db: Session, data: dict, seats_required: bool, booking_id: int | None = None) -> dict:
    """Check a booking payload; nothing is written if this raises"""
    customer_id = _parse_id(data.get("customer_id"), "customer_id")
    event_id = _parse_id(data.get("event_id"), "event_id")
    seats = parse_seats(_seats_value(data, seats_required))

    customer = db.get(Customer, customer_id)
    if not customer:
        raise BookingValidationError(f"Customer {customer_id} not found")

    event = db.get(Event, event_id)
    if not event:
        raise BookingValidationError(f"Event {event_id} not found")
    if event.is_canceled:
        raise BookingValidationError("Cannot book a cancelled event")

    if event.capacity is not None:
        query = db.query(func.coalesce(func.sum(Booking.seats), 0)).filter(
            Booking.event_id == event_id, Booking.reminder_only.is_(False)
        )
        if booking_id is not None:
            query = query.filter(Booking.id != booking_id)
        booked = query.scalar()
        if not data.get("reminder_only") and booked + seats > event.capacity:
            remaining = max(event.capacity - booked, 0)
            raise BookingValidationError(f"Only {remaining} seats remain for this event")

    notes = data.get("notes")
    return {
        "customer_id": customer_id,
        "event_id": event_id,
        "seats": seats,
        "reminder_only": bool(data.get("reminder_only", False)),
        "notes": (notes.strip() or None) if isinstance(notes, str) else None,
    }


def _wants_notification(data: dict, default: bool) -> bool:
    value = data.get("send_notification")
    return default if value is None else bool(value)


def _notify(db: Session, booking: Booking, service: TwilioService | None) -> bool:
    """Send a confirmation; any failure is logged and reported as False"""
    try:
        return send_booking_confirmation(db, booking, service=service)
    except Exception:
        logger.exception(f"Error sending confirmation SMS for booking {booking.id}")
        return False


def get_booking(db: Session, booking_id: int) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise BookingNotFoundError(booking_id)
    return booking


def list_bookings(db: Session, event_id: int | None = None, customer_id: int | None = None) -> list[Booking]:
    """Bookings, newest first, optionally for one event or customer"""
    query = db.query(Booking)
    if event_id is not None:
        query = query.filter(Booking.event_id == event_id)
    if customer_id is not None:
        query = query.filter(Booking.customer_id == customer_id)
    return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def create_booking(db: Session, data: dict, service: TwilioService | None = None) -> tuple[Booking, bool]:
    """
    Create a booking and, unless send_notification is false, text the
    customer a confirmation.

    Args:
        db: Database session
        data: customer_id, event_id, seats_or_reminder (or seats), notes,
            reminder_only, send_notification
        service: Gateway service used for the confirmation

    Returns:
        (booking, sms_sent)

    Raises:
        BookingValidationError: before anything is written
    """
    fields = _validate(db, data, seats_required=False)
    send_notification = _wants_notification(data, default=True)

    booking = Booking(**fields, send_notification=send_notification)
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info(f"Created booking {booking.id} for event {booking.event_id} ({booking.seats} seat(s))")

    sms_sent = _notify(db, booking, service) if send_notification else False
    return booking, sms_sent


def update_booking(
    db: Session, booking_id: int, data: dict, service: TwilioService | None = None
) -> tuple[Booking, bool]:
    """Update a booking in place; re-sends the confirmation if requested"""
    booking = get_booking(db, booking_id)
    fields = _validate(db, data, seats_required=True, booking_id=booking_id)
    send_notification = _wants_notification(data, default=False)

    for key, value in fields.items():
        setattr(booking, key, value)
    if data.get("send_notification") is not None:
        booking.send_notification = send_notification
    db.commit()
    db.refresh(booking)
    logger.info(f"Updated booking {booking.id}")

    sms_sent = _notify(db, booking, service) if send_notification else False
    return booking, sms_sent


def delete_booking(db: Session, booking_id: int) -> None:
    """
    Delete a booking. Its SMS records are archived, not deleted.

    Raises:
        BookingNotFoundError: if no booking has that id
    """
    booking = get_booking(db, booking_id)

    archived = (
        db.query(SmsMessage)
        .filter(SmsMessage.booking_id == booking_id)
        .update({SmsMessage.is_archived: True}, synchronize_session=False)
    )
    db.delete(booking)
    db.commit()
    logger.info(f"Deleted booking {booking_id}, archived {archived} message(s)")
