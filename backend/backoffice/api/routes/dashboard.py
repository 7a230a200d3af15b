from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backoffice.api.deps import expiry_window, get_current_identity, request_now
from backoffice.db import crud
from backoffice.db.session import get_db
from backoffice.services import aggregation
from backoffice.services.lifecycle import BOOKING_PROJECTION, PAYMENT_PROJECTION

router = APIRouter(dependencies=[Depends(get_current_identity)])

@router.get("/summary", response_model=dict)
def dashboard_summary(db: Session = Depends(get_db), now: datetime = Depends(request_now),
                      window_days: int = Depends(expiry_window)):
    """Summary tiles: bookings and payments computed from one snapshot and one instant."""
    records = crud.load_booking_records(db)
    bookings = aggregation.summarize(records, now, BOOKING_PROJECTION, window_days)
    payments = aggregation.summarize(records, now, PAYMENT_PROJECTION, window_days)
    return {
        "total_bookings": bookings["total"],
        "booking_counts": bookings["counts"],
        "payment_counts": payments["counts"],
        "total_revenue": float(bookings["revenue"]),
        "pending_amount": float(payments["pending_amount"]),
        "overdue": payments["overdue"],
        "employees": crud.count_employees(db),
        "generated_at": now.isoformat(),
    }
