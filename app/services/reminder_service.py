"""
Reminder Service
Finds bookings whose event is 7 days or 24 hours away and texts a reminder
"""
import logging
from datetime import datetime, timedelta
from enum import Enum

from sqlalchemy.orm import Session, joinedload

from app.exceptions import ReminderError
from app.models import Booking, Event, SmsMessage
from app.services import templates
from app.services.booking_service import get_booking
from app.services.sms_service import STATUS_DISABLED, SmsResult, TwilioService, dispatch

logger = logging.getLogger(__name__)


class ReminderKind(str, Enum):
    SEVEN_DAY = "7day"
    TWENTY_FOUR_HOUR = "24hr"

    @property
    def days_before(self) -> int:
        return 7 if self is ReminderKind.SEVEN_DAY else 1

    @property
    def message_type(self) -> str:
        return f"reminder_{self.value}"

    @property
    def template(self) -> str:
        return templates.REMINDER_7DAY if self is ReminderKind.SEVEN_DAY else templates.REMINDER_24HR


def _empty_summary() -> dict:
    return {"processed": 0, "sent": 0, "failed": 0, "skipped": 0}


def reminder_already_sent(db: Session, booking_id: int, kind: ReminderKind) -> bool:
    """A reminder counts as sent once a non-failed record of its kind exists"""
    return (
        db.query(SmsMessage.id)
        .filter(
            SmsMessage.booking_id == booking_id,
            SmsMessage.message_type == kind.message_type,
            SmsMessage.status != "failed",
            SmsMessage.is_archived.is_(False),
        )
        .first()
        is not None
    )


def bookings_for_date(db: Session, target_date) -> list[Booking]:
    """Bookings on non-cancelled events starting on the given calendar date"""
    day_start = datetime.combine(target_date, datetime.min.time())
    day_end = day_start + timedelta(days=1)
    return (
        db.query(Booking)
        .join(Event, Booking.event_id == Event.id)
        .options(joinedload(Booking.customer), joinedload(Booking.event))
        .filter(
            Event.is_canceled.is_(False),
            Event.start_time >= day_start,
            Event.start_time < day_end,
        )
        .order_by(Event.start_time, Booking.id)
        .all()
    )


def _send_reminder(db: Session, booking: Booking, kind: ReminderKind, service: TwilioService | None) -> SmsResult:
    customer = booking.customer
    body = templates.render_template(kind.template, **templates.event_values(booking.event, customer, booking))
    return dispatch(
        db,
        customer.mobile_number,
        body,
        kind.message_type,
        booking_id=booking.id,
        customer_id=customer.id,
        service=service,
    )


def process_reminders_for_kind(
    db: Session, kind: ReminderKind, now: datetime, service: TwilioService | None = None
) -> dict:
    """
    Send one kind of reminder for every eligible booking.

    Failures are counted, not retried.
    """
    summary = _empty_summary()
    target_date = (now + timedelta(days=kind.days_before)).date()

    for booking in bookings_for_date(db, target_date):
        summary["processed"] += 1

        if not booking.customer or not booking.customer.mobile_number:
            summary["skipped"] += 1
            continue
        if booking.event.start_time < now:
            summary["skipped"] += 1
            continue
        if reminder_already_sent(db, booking.id, kind):
            summary["skipped"] += 1
            continue

        try:
            result = _send_reminder(db, booking, kind, service)
        except Exception:
            logger.exception(f"Error processing {kind.value} reminder for booking {booking.id}")
            summary["failed"] += 1
            continue

        if result.success:
            summary["sent"] += 1
        elif result.status == STATUS_DISABLED:
            summary["skipped"] += 1
        else:
            logger.warning(f"{kind.value} reminder for booking {booking.id} failed: {result.error}")
            summary["failed"] += 1

    logger.info(
        f"{kind.value} reminders for {target_date}: processed={summary['processed']} "
        f"sent={summary['sent']} failed={summary['failed']} skipped={summary['skipped']}"
    )
    return summary


def process_reminders(db: Session, now: datetime | None = None, service: TwilioService | None = None) -> dict:
    """
    Run the 7-day and 24-hour reminder scan.

    Returns:
        dict with a summary per reminder kind and the totals
    """
    now = now or datetime.now()
    result = {"totals": _empty_summary()}

    for kind in ReminderKind:
        summary = process_reminders_for_kind(db, kind, now, service=service)
        result[kind.value] = summary
        for key, value in summary.items():
            result["totals"][key] += value

    return result


def send_booking_reminder(
    db: Session,
    booking_id: int,
    kind: ReminderKind,
    now: datetime | None = None,
    service: TwilioService | None = None,
) -> SmsResult:
    """
    Send a reminder for one booking on demand.

    Raises:
        BookingNotFoundError: unknown booking
        ReminderError: past or cancelled event, or no mobile number
    """
    now = now or datetime.now()
    booking = get_booking(db, booking_id)

    if booking.event.is_canceled:
        raise ReminderError("Cannot send reminder for a cancelled event")
    if booking.event.start_time < now:
        raise ReminderError("Cannot send reminder for past event")
    if not booking.customer or not booking.customer.mobile_number:
        raise ReminderError("Customer has no mobile number")

    return _send_reminder(db, booking, kind, service)
