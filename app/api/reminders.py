"""
Reminder endpoints, called by an external scheduler
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_admin, require_reminder_key
from app.api.schemas import ReminderRequest
from app.database import get_db
from app.services.reminder_service import ReminderKind, process_reminders, send_booking_reminder

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


@router.get("/process")
def reminder_status():
    return {
        "status": "Reminder service is online",
        "info": "Use POST to trigger reminder processing",
    }


@router.post("/process", dependencies=[Depends(require_reminder_key)])
def process(db: Session = Depends(get_db)):
    """Send all due 7-day and 24-hour reminders"""
    result = process_reminders(db)
    return {"success": True, **result}


@router.post("/{booking_id}", dependencies=[Depends(require_admin)])
def send_reminder(booking_id: int, request: ReminderRequest, db: Session = Depends(get_db)):
    """Send one reminder for a booking now"""
    try:
        kind = ReminderKind(request.reminder_type)
    except ValueError:
        raise HTTPException(status_code=400, detail="Valid reminderType (7day or 24hr) is required")

    result = send_booking_reminder(db, booking_id, kind)
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error or "Failed to send reminder")
    return {"success": True, "message": f"{kind.value} reminder sent successfully"}
