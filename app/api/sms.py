"""
SMS endpoints and Twilio webhooks
"""
from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.api.schemas import CustomerSmsRequest, SendTestSmsRequest, SmsMessageOut
from app.database import get_db
from app.services import customer_service, sms_service

router = APIRouter(prefix="/api/sms", tags=["sms"], dependencies=[Depends(require_admin)])
webhooks = APIRouter(prefix="/api/webhooks/twilio", tags=["webhooks"])

EMPTY_TWIML = '<?xml version="1.0" encoding="UTF-8"?>\n<Response></Response>'


@router.get("/config")
def sms_config():
    return {"success": True, **sms_service.sms_config_status()}


@router.post("/test")
def send_test_sms(request: SendTestSmsRequest, db: Session = Depends(get_db)):
    result = sms_service.send_test_message(db, request.to, request.message)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error or "Failed to send SMS")
    return {"success": True, "sid": result.sid, "status": result.status}


@router.post("/send")
def send_customer_sms(request: CustomerSmsRequest, db: Session = Depends(get_db)):
    """Send a manually written message to a customer"""
    customer = customer_service.get_customer(db, request.customer_id)
    result = sms_service.send_customer_message(db, customer, request.message, booking_id=request.booking_id)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.error or "Failed to send SMS")
    return {"success": True, "sid": result.sid, "status": result.status}


@router.get("/replies", response_model=list[SmsMessageOut])
def get_replies(db: Session = Depends(get_db)):
    return sms_service.list_replies(db)


@router.get("/replies/unread-count")
def get_unread_count(db: Session = Depends(get_db)):
    return {"count": sms_service.count_unread_replies(db)}


@router.post("/replies/read-all")
def mark_all_read(db: Session = Depends(get_db)):
    return {"success": True, "updated": sms_service.mark_all_replies_read(db)}


@router.post("/replies/{reply_id}/read", response_model=SmsMessageOut)
def mark_read(reply_id: int, db: Session = Depends(get_db)):
    return sms_service.mark_reply_read(db, reply_id)


@webhooks.post("")
def inbound_sms(From: str = Form(default=""), Body: str = Form(default=""), db: Session = Depends(get_db)):
    """Store a customer's reply and answer Twilio with empty TwiML"""
    if not From or not Body:
        raise HTTPException(status_code=400, detail="Missing required fields")

    sms_service.receive_reply(db, From, Body)
    return Response(content=EMPTY_TWIML, media_type="text/xml")


@webhooks.post("/status")
def status_callback(
    MessageSid: str = Form(default=""),
    MessageStatus: str = Form(default=""),
    db: Session = Depends(get_db),
):
    """Apply a Twilio delivery status update"""
    if not MessageSid or not MessageStatus:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if MessageStatus not in sms_service.DELIVERY_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid message status")

    updated = sms_service.update_message_status(db, MessageSid, MessageStatus)
    return {"success": True, "updated": updated}
