from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.api.schemas import (
    CategoryOut,
    CategoryRequest,
    CustomerOut,
    CustomerRequest,
    EventOut,
    EventRequest,
    SmsMessageOut,
)
from app.config import settings
from app.database import get_db
from app.services import customer_service, event_service, sms_service

router = APIRouter()
admin = APIRouter(prefix="/api", dependencies=[Depends(require_admin)])


@router.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "app": settings.app_name}


# Customers

@admin.get("/customers", response_model=list[CustomerOut])
def get_customers(q: Optional[str] = None, db: Session = Depends(get_db)):
    """List customers, or search by name or mobile number with ?q="""
    if q:
        return customer_service.search_customers(db, q)
    return customer_service.list_customers(db)


@admin.post("/customers", response_model=CustomerOut, status_code=201)
def create_customer(request: CustomerRequest, db: Session = Depends(get_db)):
    return customer_service.create_customer(db, request.model_dump())


@admin.get("/customers/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return customer_service.get_customer(db, customer_id)


@admin.put("/customers/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, request: CustomerRequest, db: Session = Depends(get_db)):
    return customer_service.update_customer(db, customer_id, request.model_dump())


@admin.delete("/customers/{customer_id}")
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    customer_service.delete_customer(db, customer_id)
    return {"message": "Customer deleted successfully"}


@admin.get("/customers/{customer_id}/messages", response_model=list[SmsMessageOut])
def get_customer_replies(customer_id: int, db: Session = Depends(get_db)):
    """Inbound replies from one customer"""
    customer_service.get_customer(db, customer_id)
    return sms_service.list_replies(db, customer_id=customer_id)


# Categories

@admin.get("/categories", response_model=list[CategoryOut])
def get_categories(db: Session = Depends(get_db)):
    return event_service.list_categories(db)


@admin.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(request: CategoryRequest, db: Session = Depends(get_db)):
    return event_service.create_category(db, request.name, request.description)


# Events

@admin.get("/events", response_model=list[EventOut])
def get_events(upcoming: bool = False, category_id: Optional[int] = None, db: Session = Depends(get_db)):
    return event_service.list_events(db, upcoming_only=upcoming, category_id=category_id)


@admin.post("/events", response_model=EventOut, status_code=201)
def create_event(request: EventRequest, db: Session = Depends(get_db)):
    return event_service.create_event(db, request.model_dump())


@admin.get("/events/{event_id}", response_model=EventOut)
def get_event(event_id: int, db: Session = Depends(get_db)):
    return event_service.get_event(db, event_id)


@admin.put("/events/{event_id}", response_model=EventOut)
def update_event(event_id: int, request: EventRequest, db: Session = Depends(get_db)):
    return event_service.update_event(db, event_id, request.model_dump())


@admin.post("/events/{event_id}/cancel")
def cancel_event(event_id: int, notify: bool = True, db: Session = Depends(get_db)):
    """Cancel an event and text everyone booked on it"""
    event, sent = event_service.cancel_event(db, event_id, notify=notify)
    return {
        "success": True,
        "event": EventOut.model_validate(event),
        "cancellationsSent": sent,
    }
