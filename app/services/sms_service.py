"""
SMS Service using Twilio
Sends notifications, records every attempt and handles gateway callbacks
"""
import logging
import uuid
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from app.config import Settings, settings
from app.exceptions import InvalidMessageStatus, NotFoundError
from app.models import Customer, SmsMessage
from app.services import templates
from app.services.phone import format_uk_mobile_number, mask_phone_number

logger = logging.getLogger(__name__)

# Statuses Twilio reports through the status callback
DELIVERY_STATUSES = {"queued", "failed", "sent", "delivered", "undelivered"}

# Returned when SMS_ENABLED is off; nothing is sent or recorded
STATUS_DISABLED = "disabled"


class SmsResult(BaseModel):
    """Uniform outcome of a send attempt"""

    success: bool
    status: str
    sid: Optional[str] = None
    error: Optional[str] = None
    record_id: Optional[int] = None


class TwilioService:
    """Service to send SMS using Twilio"""

    def __init__(self, config: Settings | None = None):
        self.config = config or settings
        self.account_sid = self.config.twilio_account_sid
        self.auth_token = self.config.twilio_auth_token
        self.phone_number = self.config.twilio_phone_number
        self.client = None

    def _init_client(self):
        """Initialize Twilio client"""
        if self.client is None:
            self.client = Client(self.account_sid, self.auth_token)
        return self.client

    def send_sms(self, to_number: str, message: str) -> SmsResult:
        """
        Send SMS using Twilio.

        Nothing leaves the process when SMS is disabled or when running in
        simulation mode (any non-production environment, or SMS_SIMULATION).

        Args:
            to_number: Recipient phone number in E.164 format
            message: Message to send

        Returns:
            SmsResult with the gateway id and status
        """
        if not self.config.sms_enabled:
            logger.info("SMS sending is disabled, message not sent")
            return SmsResult(success=False, status=STATUS_DISABLED, error="SMS sending is disabled")

        if self.config.sms_simulated:
            sid = f"SIMULATED_{uuid.uuid4().hex}"
            logger.info(f"[SMS SIMULATION] To: {mask_phone_number(to_number)} SID: {sid}")
            logger.debug(f"[SMS SIMULATION] Message: {message}")
            return SmsResult(success=True, status="simulated", sid=sid)

        if not (self.account_sid and self.auth_token and self.phone_number):
            logger.error("Missing Twilio credentials or phone number")
            return SmsResult(
                success=False,
                status="failed",
                error="Missing Twilio credentials or phone number",
            )

        try:
            sms = self._init_client().messages.create(
                body=message,
                from_=self.phone_number,
                to=to_number
            )
        except TwilioRestException as e:
            logger.error(f"Twilio API error [{e.code}]: {e.msg}")
            return SmsResult(success=False, status="failed", error=f"[{e.code}] {e.msg}")
        except Exception as e:
            logger.error(f"Error sending SMS: {str(e)}")
            return SmsResult(success=False, status="failed", error=f"Error sending SMS: {str(e)}")

        logger.info(f"SMS sent to {mask_phone_number(to_number)} (SID: {sms.sid})")
        return SmsResult(success=True, status=sms.status or "queued", sid=sms.sid)


# Global instance
_twilio_service = None


def get_twilio_service() -> TwilioService:
    """Get or create Twilio service instance"""
    global _twilio_service
    if _twilio_service is None:
        _twilio_service = TwilioService()
    return _twilio_service


def _record(db: Session, **fields) -> Optional[SmsMessage]:
    """Write an audit row; failures are logged and never raised"""
    record = SmsMessage(**fields)
    try:
        db.add(record)
        db.commit()
        db.refresh(record)
        return record
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Failed to record {fields.get('message_type')} SMS")
        return None


def dispatch(
    db: Session,
    to_number: str,
    body: str,
    message_type: str,
    booking_id: int | None = None,
    customer_id: int | None = None,
    service: TwilioService | None = None,
) -> SmsResult:
    """
    Send a message and log the attempt to sms_messages.

    Nothing is recorded when SMS sending is disabled.

    Args:
        db: Database session
        to_number: Recipient phone number, any UK mobile format
        body: Message text
        message_type: booking_confirmation, reminder_7day, test, ...
        booking_id: Booking the message belongs to, if any
        customer_id: Customer the message belongs to, if any
        service: Gateway service, defaults to the shared instance

    Returns:
        SmsResult, with record_id set when the audit row was written
    """
    service = service or get_twilio_service()
    recipient = format_uk_mobile_number(to_number)

    if recipient is None:
        logger.warning(f"Invalid phone number format: {mask_phone_number(to_number)}")
        result = SmsResult(
            success=False, status="failed", error=f"Invalid phone number format: {to_number}"
        )
        recipient = to_number
    else:
        result = service.send_sms(recipient, body)
        if result.status == STATUS_DISABLED:
            return result

    record = _record(
        db,
        booking_id=booking_id,
        customer_id=customer_id,
        direction="outbound",
        message_type=message_type,
        recipient=recipient,
        content=body,
        status=result.status,
        message_sid=result.sid,
        error_message=result.error,
    )
    if record is not None:
        result.record_id = record.id
    return result


def send_booking_confirmation(db: Session, booking, service: TwilioService | None = None) -> bool:
    """Send a booking confirmation. Returns whether the message went out."""
    customer = booking.customer
    if not customer or not customer.mobile_number:
        logger.info(f"Booking {booking.id}: customer has no mobile number, no confirmation sent")
        return False

    template = templates.REMINDER_CONFIRMATION if booking.reminder_only else templates.BOOKING_CONFIRMATION
    body = templates.render_template(template, **templates.event_values(booking.event, customer, booking))
    result = dispatch(
        db,
        customer.mobile_number,
        body,
        "booking_confirmation",
        booking_id=booking.id,
        customer_id=customer.id,
        service=service,
    )
    if not result.success:
        logger.warning(f"Booking {booking.id}: confirmation SMS failed: {result.error}")
    return result.success


def send_booking_cancellation(db: Session, booking, service: TwilioService | None = None) -> bool:
    """Tell a customer their event was cancelled"""
    customer = booking.customer
    if not customer or not customer.mobile_number:
        return False

    body = templates.render_template(
        templates.BOOKING_CANCELLATION, **templates.event_values(booking.event, customer, booking)
    )
    result = dispatch(
        db,
        customer.mobile_number,
        body,
        "booking_cancellation",
        booking_id=booking.id,
        customer_id=customer.id,
        service=service,
    )
    return result.success


def send_test_message(db: Session, to_number: str, body: str, service: TwilioService | None = None) -> SmsResult:
    """Send a test message not tied to a booking or customer"""
    return dispatch(db, to_number, body, "test", service=service)


def send_customer_message(
    db: Session,
    customer: Customer,
    body: str,
    booking_id: int | None = None,
    service: TwilioService | None = None,
) -> SmsResult:
    """Send a manually written message to a customer"""
    if not customer.mobile_number:
        return SmsResult(success=False, status="failed", error="Customer has no mobile number")
    return dispatch(
        db,
        customer.mobile_number,
        body,
        "manual",
        booking_id=booking_id,
        customer_id=customer.id,
        service=service,
    )


def receive_reply(db: Session, from_number: str, body: str) -> SmsMessage:
    """Store an inbound SMS, linked to the customer with that number if any"""
    sender = format_uk_mobile_number(from_number) or from_number
    customer = db.query(Customer).filter(Customer.mobile_number == sender).first()

    reply = SmsMessage(
        customer_id=customer.id if customer else None,
        direction="inbound",
        message_type="reply",
        recipient=sender,
        content=body,
        status="received",
        is_read=False,
    )
    db.add(reply)
    db.commit()
    db.refresh(reply)
    logger.info(f"Stored SMS reply {reply.id} from {mask_phone_number(sender)}")
    return reply


def update_message_status(db: Session, message_sid: str, status: str) -> bool:
    """
    Apply a delivery status callback.

    Returns:
        True if a message with that SID was found and updated
    """
    if status not in DELIVERY_STATUSES:
        raise InvalidMessageStatus(status)

    updated = (
        db.query(SmsMessage)
        .filter(SmsMessage.message_sid == message_sid)
        .update({SmsMessage.status: status}, synchronize_session=False)
    )
    db.commit()
    if not updated:
        logger.warning(f"Status callback for unknown message SID {message_sid}")
    return bool(updated)


def list_messages_for_booking(db: Session, booking_id: int, include_archived: bool = False) -> list[SmsMessage]:
    query = db.query(SmsMessage).filter(SmsMessage.booking_id == booking_id)
    if not include_archived:
        query = query.filter(SmsMessage.is_archived.is_(False))
    return query.order_by(SmsMessage.created_at.desc(), SmsMessage.id.desc()).all()


def list_replies(db: Session, customer_id: int | None = None) -> list[SmsMessage]:
    query = db.query(SmsMessage).filter(SmsMessage.direction == "inbound")
    if customer_id is not None:
        query = query.filter(SmsMessage.customer_id == customer_id)
    return query.order_by(SmsMessage.created_at.desc(), SmsMessage.id.desc()).all()


def count_unread_replies(db: Session) -> int:
    return (
        db.query(SmsMessage)
        .filter(SmsMessage.direction == "inbound", SmsMessage.is_read.is_(False))
        .count()
    )


def mark_reply_read(db: Session, reply_id: int) -> SmsMessage:
    reply = (
        db.query(SmsMessage)
        .filter(SmsMessage.id == reply_id, SmsMessage.direction == "inbound")
        .first()
    )
    if not reply:
        raise NotFoundError(f"Reply {reply_id} not found")
    reply.is_read = True
    db.commit()
    db.refresh(reply)
    return reply


def mark_all_replies_read(db: Session) -> int:
    updated = (
        db.query(SmsMessage)
        .filter(SmsMessage.direction == "inbound", SmsMessage.is_read.is_(False))
        .update({SmsMessage.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def sms_config_status(config: Settings | None = None) -> dict:
    """Report SMS configuration with credentials masked"""
    config = config or settings
    return {
        "sms_enabled": config.sms_enabled,
        "simulated": config.sms_simulated,
        "environment": config.environment,
        "twilio_configured": config.twilio_configured,
        "twilio_account_sid": f"{config.twilio_account_sid[:8]}..." if config.twilio_account_sid else None,
        "twilio_auth_token": bool(config.twilio_auth_token),
        "twilio_phone_number": config.twilio_phone_number or None,
    }
