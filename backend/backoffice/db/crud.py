from datetime import datetime
from typing import Iterable

from sqlalchemy import or_
from sqlalchemy.orm import Session

from backoffice.models.booking import Booking
from backoffice.models.employee import Employee
from backoffice.services.records import BookingRecord, normalize_records

def list_bookings(db: Session) -> list[Booking]:
    return db.query(Booking).order_by(Booking.created_at.desc(), Booking.id.desc()).all()

def load_booking_records(db: Session) -> list[BookingRecord]:
    return normalize_records(list_bookings(db))

def get_booking(db: Session, booking_id: int) -> Booking | None:
    return db.get(Booking, booking_id)

def create_booking(db: Session, data: dict, now: datetime) -> Booking:
    booking = Booking(**data)
    booking.status = "Pending"
    booking.payment_status = "Pending"
    booking.booking_date = now
    booking.created_at = now
    booking.updated_at = now
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking

def update_booking_payment(db: Session, booking: Booking, now: datetime, payment_status: str | None = None,
                           payment_method: str | None = None, transaction_id: str | None = None) -> Booking:
    if payment_status is not None:
        booking.payment_status = payment_status
        if payment_status == "Paid" and booking.payment_date is None:
            booking.payment_date = now
    if payment_method is not None:
        booking.payment_method = payment_method
    if transaction_id is not None:
        booking.transaction_id = transaction_id
    booking.updated_at = now
    db.commit()
    db.refresh(booking)
    return booking

def delete_booking(db: Session, booking: Booking) -> None:
    db.delete(booking)
    db.commit()

def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def find_by_payment_link(db: Session, link_id: str | None, reference_id: str | None = None) -> Booking | None:
    """Booking paid through a gateway link: exact link id, or the id as the last URL path segment."""
    if link_id:
        b = (
            db.query(Booking)
            .filter(or_(
                Booking.payment_link_id == link_id,
                Booking.payment_link_url.like(f"%/{_escape_like(link_id)}", escape="\\"),
            ))
            .order_by(Booking.id.asc())
            .first()
        )
        if b:
            return b
    if reference_id and str(reference_id).isdigit():
        return db.get(Booking, int(reference_id))
    return None

def agent_phones(db: Session, names: Iterable[str | None]) -> dict[str, str]:
    wanted = {n for n in names if n}
    if not wanted:
        return {}
    rows = db.query(Employee).filter(Employee.full_name.in_(wanted)).all()
    return {e.full_name: e.phone for e in rows if e.phone}

def count_employees(db: Session) -> int:
    return db.query(Employee).filter(Employee.is_active == True).count()  # noqa: E712
