import logging
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from backoffice.api.deps import Period, expiry_window, get_current_identity, get_period, request_now, require_roles
from backoffice.core.config import settings
from backoffice.core.security import verify_webhook_signature
from backoffice.db import crud
from backoffice.db.session import get_db
from backoffice.models.booking import Booking
from backoffice.schemas.booking import BookingCreate, BookingUpdate, PaymentEntity, PaymentLinkEntity, PaymentWebhook
from backoffice.services import aggregation
from backoffice.services.lifecycle import BOOKING_PROJECTION, PAID_FLAG, BookingStatus, derive_booking_status
from backoffice.services.records import BookingRecord, normalize_record

router = APIRouter()
logger = logging.getLogger(__name__)

PAID_EVENTS = {"payment_link.paid", "payment.captured"}
STATUS_TABS = {"all"} | {s.value.lower() for s in BookingStatus}

def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None

def booking_out(b: Booking, record: BookingRecord, now: datetime, window_days: int) -> dict:
    return {
        "id": b.id,
        "lead_id": b.lead_id,
        "customer": record.customer,
        "email": record.email,
        "phone": record.phone,
        "package_name": record.package_name,
        "destination": record.destination,
        "travelers": record.travelers,
        "amount": float(record.amount),
        "status": derive_booking_status(record, now, window_days).value,
        "payment_status": record.raw_payment_flag or "Pending",
        "payment_method": record.payment_method,
        "transaction_id": record.transaction_id,
        "payment_link_url": b.payment_link_url,
        "assigned_agent": record.assigned_agent,
        "travel_date": _iso(record.travel_date),
        "booking_date": _iso(record.booking_date),
    }

@router.post("/payment-webhook")
async def payment_webhook(request: Request, db: Session = Depends(get_db), now: datetime = Depends(request_now)):
    """Payment gateway callback: flips the raw payment flag to Paid.

    Events other than a paid payment link / captured payment are acknowledged
    and ignored. When PAYMENT_WEBHOOK_SECRET is set the X-Webhook-Signature
    header must carry the hex HMAC-SHA256 of the raw body.
    """
    body = await request.body()
    secret = settings.payment_webhook_secret
    if secret and not verify_webhook_signature(body, request.headers.get("x-webhook-signature"), secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")
    try:
        event = PaymentWebhook.model_validate_json(body)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid webhook payload")
    if event.event not in PAID_EVENTS:
        logger.warning("Ignoring payment webhook event %s", event.event)
        return {"success": True, "updated": False}
    link = event.payload.payment_link.entity if event.payload.payment_link else PaymentLinkEntity()
    payment = event.payload.payment.entity if event.payload.payment else PaymentEntity()
    notes = payment.notes if isinstance(payment.notes, dict) else {}
    link_id = link.id or payment.payment_link_id or payment.order_id
    reference_id = link.reference_id or notes.get("booking_id")
    booking = crud.find_by_payment_link(db, link_id, reference_id)
    if not booking:
        logger.warning("No booking for payment link %s (reference %s)", link_id, reference_id)
        return {"success": True, "updated": False}
    crud.update_booking_payment(
        db, booking, now,
        payment_status=PAID_FLAG,
        payment_method=payment.method,
        transaction_id=payment.id,
    )
    logger.info("Booking %s confirmed via payment webhook", booking.id)
    return {"success": True, "updated": True, "booking_id": booking.id}

@router.get("", dependencies=[Depends(get_current_identity)])
@router.get("/", dependencies=[Depends(get_current_identity)])
def list_bookings(
    status_filter: str | None = Query(None, alias="status"),
    period: Period = Depends(get_period),
    db: Session = Depends(get_db),
    now: datetime = Depends(request_now),
    window_days: int = Depends(expiry_window),
):
    """Bookings list with derived statuses.

    counts and revenue describe the whole period-filtered set (they feed the
    filter tab badges and summary tiles); items are additionally filtered by
    the selected status tab.
    """
    tab = (status_filter or "all").strip().lower()
    if tab not in STATUS_TABS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"unknown status: {status_filter}")
    rows = crud.list_bookings(db)
    by_id = {b.id: b for b in rows}
    records = aggregation.filter_by_period(
        [normalize_record(b) for b in rows], now, period.month, period.year, period.day
    )
    visible = aggregation.filter_by_status(records, tab, now, BOOKING_PROJECTION, window_days)
    items = [booking_out(by_id[r.id], r, now, window_days) for r in visible]
    return {
        "items": items,
        "total": len(records),
        "counts": aggregation.count_by_status(records, now, BOOKING_PROJECTION, window_days),
        "revenue": float(aggregation.sum_revenue(records, BookingStatus.COMPLETED, now, BOOKING_PROJECTION, window_days)),
    }

@router.get("/{booking_id}", dependencies=[Depends(get_current_identity)])
def get_booking(booking_id: int, db: Session = Depends(get_db), now: datetime = Depends(request_now),
                window_days: int = Depends(expiry_window)):
    b = crud.get_booking(db, booking_id)
    if not b:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking_out(b, normalize_record(b), now, window_days)

@router.post("", status_code=201, dependencies=[Depends(get_current_identity)])
@router.post("/", status_code=201, dependencies=[Depends(get_current_identity)])
def create_booking(payload: BookingCreate, db: Session = Depends(get_db), now: datetime = Depends(request_now),
                   window_days: int = Depends(expiry_window)):
    if not payload.customer or not payload.email or not payload.package_name or not payload.destination or payload.amount is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    if payload.amount <= Decimal("0"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Amount must be positive")
    b = crud.create_booking(db, payload.model_dump(), now)
    logger.info("Booking %s created for %s (%s)", b.id, b.customer, b.destination)
    return booking_out(b, normalize_record(b), now, window_days)

@router.patch("/{booking_id}", dependencies=[Depends(get_current_identity)])
def update_booking(booking_id: int, payload: BookingUpdate, db: Session = Depends(get_db),
                   now: datetime = Depends(request_now), window_days: int = Depends(expiry_window)):
    if payload.payment_status is None and payload.payment_method is None and payload.transaction_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nothing to update")
    b = crud.get_booking(db, booking_id)
    if not b:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    b = crud.update_booking_payment(
        db, b, now,
        payment_status=payload.payment_status,
        payment_method=payload.payment_method,
        transaction_id=payload.transaction_id,
    )
    logger.info("Booking %s payment fields updated (payment_status=%s)", b.id, b.payment_status)
    return booking_out(b, normalize_record(b), now, window_days)

@router.delete("/{booking_id}", dependencies=[Depends(require_roles("admin"))])
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    b = crud.get_booking(db, booking_id)
    if not b:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    crud.delete_booking(db, b)
    logger.info("Booking %s deleted", booking_id)
    return {"message": "Booking deleted successfully"}
