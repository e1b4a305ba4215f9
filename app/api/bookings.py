"""
Booking endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.api.schemas import BookingOut, BookingRequest, BookingResponse, SmsMessageOut
from app.database import get_db
from app.services import booking_service, sms_service

router = APIRouter(prefix="/api/bookings", tags=["bookings"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[BookingOut])
def get_bookings(
    event_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """Get all bookings, newest first"""
    return booking_service.list_bookings(db, event_id=event_id, customer_id=customer_id)


@router.post("", response_model=BookingResponse)
def create_booking(request: BookingRequest, db: Session = Depends(get_db)):
    """
    Create a booking.

    - Validate customer, event and seat count (400 on failure)
    - Save the booking
    - Send a confirmation SMS unless send_notification is false
    """
    booking, sms_sent = booking_service.create_booking(db, request.model_dump())
    return BookingResponse(
        message="Booking created successfully",
        booking=BookingOut.model_validate(booking),
        smsSent=sms_sent,
    )


@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    return booking_service.get_booking(db, booking_id)


@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(booking_id: int, request: BookingRequest, db: Session = Depends(get_db)):
    booking, sms_sent = booking_service.update_booking(db, booking_id, request.model_dump())
    return BookingResponse(
        message="Booking updated successfully",
        booking=BookingOut.model_validate(booking),
        smsSent=sms_sent,
    )


@router.delete("/{booking_id}")
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    booking_service.delete_booking(db, booking_id)
    return {"success": True, "message": "Booking deleted successfully"}


@router.get("/{booking_id}/messages", response_model=list[SmsMessageOut])
def get_booking_messages(booking_id: int, db: Session = Depends(get_db)):
    """SMS history for a booking"""
    booking_service.get_booking(db, booking_id)
    return sms_service.list_messages_for_booking(db, booking_id)
