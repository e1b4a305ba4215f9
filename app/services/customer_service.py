"""
Customer records
"""
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.exceptions import CustomerValidationError, NotFoundError
from app.models import Customer, SmsMessage
from app.services.phone import format_uk_mobile_number

logger = logging.getLogger(__name__)


def _clean_fields(data: dict) -> dict:
    first_name = (data.get("first_name") or "").strip()
    if not first_name:
        raise CustomerValidationError("first_name is required")

    mobile_number = data.get("mobile_number")
    if mobile_number:
        normalised = format_uk_mobile_number(mobile_number)
        if normalised is None:
            raise CustomerValidationError(f"Invalid UK mobile number: {mobile_number}")
        mobile_number = normalised
    else:
        mobile_number = None

    return {
        "first_name": first_name,
        "last_name": (data.get("last_name") or "").strip() or None,
        "mobile_number": mobile_number,
        "notes": data.get("notes") or None,
    }


def get_customer(db: Session, customer_id: int) -> Customer:
    customer = db.get(Customer, customer_id)
    if not customer:
        raise NotFoundError(f"Customer {customer_id} not found")
    return customer


def list_customers(db: Session) -> list[Customer]:
    return db.query(Customer).order_by(Customer.last_name, Customer.first_name).all()


def search_customers(db: Session, query: str) -> list[Customer]:
    """Match on first name, last name or mobile number"""
    pattern = f"%{query.strip()}%"
    return (
        db.query(Customer)
        .filter(
            or_(
                Customer.first_name.ilike(pattern),
                Customer.last_name.ilike(pattern),
                Customer.mobile_number.ilike(pattern),
            )
        )
        .order_by(Customer.last_name, Customer.first_name)
        .all()
    )


def create_customer(db: Session, data: dict) -> Customer:
    customer = Customer(**_clean_fields(data))
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info(f"Created customer {customer.id}")
    return customer


def update_customer(db: Session, customer_id: int, data: dict) -> Customer:
    customer = get_customer(db, customer_id)
    for key, value in _clean_fields(data).items():
        setattr(customer, key, value)
    db.commit()
    db.refresh(customer)
    return customer


def delete_customer(db: Session, customer_id: int) -> None:
    """Delete a customer and their bookings; message history is archived"""
    customer = get_customer(db, customer_id)
    booking_ids = [booking.id for booking in customer.bookings]
    db.query(SmsMessage).filter(
        or_(SmsMessage.customer_id == customer_id, SmsMessage.booking_id.in_(booking_ids))
    ).update({SmsMessage.is_archived: True, SmsMessage.customer_id: None}, synchronize_session=False)
    db.delete(customer)
    db.commit()
    logger.info(f"Deleted customer {customer_id}")
