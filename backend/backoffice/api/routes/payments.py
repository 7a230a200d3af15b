from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backoffice.api.deps import Period, expiry_window, get_current_identity, get_period, request_now
from backoffice.db import crud
from backoffice.db.session import get_db
from backoffice.services import aggregation
from backoffice.services.lifecycle import PAYMENT_PROJECTION, PaymentStatus
from backoffice.services.payments import PaymentView, to_payment_view

router = APIRouter(dependencies=[Depends(get_current_identity)])

STATUS_TABS = {"all"} | {s.value.lower() for s in PaymentStatus}

def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None

def payment_out(v: PaymentView) -> dict:
    return {
        "booking_id": v.booking_id,
        "customer": v.customer,
        "email": v.email,
        "package_name": v.package_name,
        "destination": v.destination,
        "amount": float(v.amount),
        "paid_amount": float(v.paid_amount),
        "remaining_amount": float(v.remaining_amount),
        "payment_status": v.status.value,
        "payment_method": v.payment_method,
        "payment_date": _iso(v.payment_date),
        "due_date": _iso(v.due_date),
        "transaction_id": v.transaction_id,
        "assigned_agent": v.assigned_agent,
    }

@router.get("")
@router.get("/")
def list_payments(
    status_filter: str | None = Query(None, alias="status"),
    period: Period = Depends(get_period),
    db: Session = Depends(get_db),
    now: datetime = Depends(request_now),
    window_days: int = Depends(expiry_window),
):
    """Payment projection of every booking, grouped by payment (or due) date."""
    tab = (status_filter or "all").strip().lower()
    if tab not in STATUS_TABS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"unknown status: {status_filter}")
    records = aggregation.filter_by_period(
        crud.load_booking_records(db), now, period.month, period.year, period.day,
        date_of=aggregation.payment_date_of,
    )
    summary = aggregation.summarize(records, now, PAYMENT_PROJECTION, window_days)
    visible = aggregation.filter_by_status(records, tab, now, PAYMENT_PROJECTION, window_days)
    return {
        "items": [payment_out(to_payment_view(r, now, window_days)) for r in visible],
        "total": summary["total"],
        "counts": summary["counts"],
        "total_revenue": float(summary["revenue"]),
        "pending_amount": float(summary["pending_amount"]),
        "overdue": summary["overdue"],
    }
