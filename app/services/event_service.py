"""
Events and event categories
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.exceptions import EventValidationError, NotFoundError
from app.models import Event, EventCategory
from app.services.sms_service import TwilioService, send_booking_cancellation

logger = logging.getLogger(__name__)


def _clean_fields(db: Session, data: dict) -> dict:
    title = (data.get("title") or "").strip()
    if not title:
        raise EventValidationError("title is required")

    start_time = data.get("start_time")
    if isinstance(start_time, str):
        try:
            start_time = datetime.fromisoformat(start_time)
        except ValueError:
            raise EventValidationError(f"Invalid start_time: {start_time}")
    if not isinstance(start_time, datetime):
        raise EventValidationError("start_time is required")

    capacity = data.get("capacity")
    if capacity is not None and (isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0):
        raise EventValidationError("capacity must be a positive integer")

    category_id = data.get("category_id")
    if category_id is not None and not db.get(EventCategory, category_id):
        raise EventValidationError(f"Category {category_id} not found")

    return {
        "title": title,
        "description": data.get("description") or None,
        "start_time": start_time,
        "capacity": capacity,
        "category_id": category_id,
        "is_published": bool(data.get("is_published", True)),
    }


def create_category(db: Session, name: str, description: str | None = None) -> EventCategory:
    name = (name or "").strip()
    if not name:
        raise EventValidationError("name is required")
    if db.query(EventCategory).filter(EventCategory.name == name).first():
        raise EventValidationError(f"Category {name} already exists")
    category = EventCategory(name=name, description=description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def list_categories(db: Session) -> list[EventCategory]:
    return db.query(EventCategory).order_by(EventCategory.name).all()


def get_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError(f"Event {event_id} not found")
    return event


def list_events(db: Session, upcoming_only: bool = False, category_id: int | None = None) -> list[Event]:
    query = db.query(Event)
    if upcoming_only:
        query = query.filter(Event.start_time >= datetime.now(), Event.is_canceled.is_(False))
    if category_id is not None:
        query = query.filter(Event.category_id == category_id)
    return query.order_by(Event.start_time).all()


def create_event(db: Session, data: dict) -> Event:
    event = Event(**_clean_fields(db, data))
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info(f"Created event {event.id}: {event.title}")
    return event


def update_event(db: Session, event_id: int, data: dict) -> Event:
    event = get_event(db, event_id)
    for key, value in _clean_fields(db, data).items():
        setattr(event, key, value)
    db.commit()
    db.refresh(event)
    return event


def cancel_event(
    db: Session, event_id: int, notify: bool = True, service: TwilioService | None = None
) -> tuple[Event, int]:
    """
    Mark an event cancelled and text everyone booked on it.

    Returns:
        (event, number of cancellation messages sent)
    """
    event = get_event(db, event_id)
    event.is_canceled = True
    db.commit()
    db.refresh(event)
    logger.info(f"Cancelled event {event.id}")

    sent = 0
    if notify:
        for booking in list(event.bookings):
            try:
                if send_booking_cancellation(db, booking, service=service):
                    sent += 1
            except Exception:
                logger.exception(f"Error sending cancellation SMS for booking {booking.id}")
    return event, sent
