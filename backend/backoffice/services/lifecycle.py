"""Booking lifecycle: date arithmetic and derived display status.

Every screen (dashboard tiles, bookings list, payments list, reports and CSV
exports) shows a status computed here from three inputs only: the raw payment
flag persisted by the payment confirmation flow, the booking date, and the
``now`` instant captured once per request. Nothing in this module touches the
database or reads the wall clock on its own.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Protocol

PAID_FLAG = "Paid"
DEFAULT_EXPIRY_DAYS = 30

_ONE_DAY = timedelta(days=1)


class BookingStatus(str, Enum):
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    PENDING = "Pending"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    CANCELLED = "Cancelled"
    PENDING = "Pending"


BOOKING_PROJECTION = "booking"
PAYMENT_PROJECTION = "payment"

STATUSES_BY_PROJECTION: dict[str, tuple[str, ...]] = {
    BOOKING_PROJECTION: tuple(s.value for s in BookingStatus),
    PAYMENT_PROJECTION: tuple(s.value for s in PaymentStatus),
}


class StatusInput(Protocol):
    raw_payment_flag: str | None
    booking_date: Any


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def coerce_datetime(value: Any) -> datetime | None:
    """Best-effort conversion of a stored date value to a naive datetime.

    Accepts datetimes, dates and ISO-8601 strings (``2024-01-01``,
    ``2024-01-01T10:00:00Z``, ``2024-01-01 10:00:00+05:30``). Returns None for
    anything else instead of raising.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        return _naive_utc(datetime.fromisoformat(s))
    except ValueError:
        return None


def parse_reference_date(value: Any, now: datetime) -> datetime:
    """Reference date for age arithmetic; missing or unparseable means ``now``.

    A booking with no usable date is treated as just booked, never as
    infinitely old.
    """
    parsed = coerce_datetime(value)
    return parsed if parsed is not None else _naive_utc(now)


def age_in_days(reference: Any, now: datetime) -> int:
    """Whole days elapsed from ``reference`` to ``now`` (floored)."""
    ref = parse_reference_date(reference, now)
    return (_naive_utc(now) - ref) // _ONE_DAY


def is_expired(reference: Any, now: datetime, window_days: int = DEFAULT_EXPIRY_DAYS) -> bool:
    return age_in_days(reference, now) > window_days


def is_paid(raw_payment_flag: Any) -> bool:
    return raw_payment_flag == PAID_FLAG


def derive_booking_status(record: StatusInput, now: datetime, window_days: int = DEFAULT_EXPIRY_DAYS) -> BookingStatus:
    """Display status of a booking.

    Precedence is fixed: paid wins over everything (a paid booking is never
    shown as cancelled, whatever its date), then an unpaid booking past the
    expiry window is shown as cancelled, otherwise it is pending.
    """
    if is_paid(record.raw_payment_flag):
        return BookingStatus.COMPLETED
    if is_expired(record.booking_date, now, window_days):
        return BookingStatus.CANCELLED
    return BookingStatus.PENDING


_BOOKING_TO_PAYMENT = {
    BookingStatus.COMPLETED: PaymentStatus.PAID,
    BookingStatus.CANCELLED: PaymentStatus.CANCELLED,
    BookingStatus.PENDING: PaymentStatus.PENDING,
}


def derive_payment_status(record: StatusInput, now: datetime, window_days: int = DEFAULT_EXPIRY_DAYS) -> PaymentStatus:
    """Same rule as :func:`derive_booking_status`, labelled for the payments screen."""
    return _BOOKING_TO_PAYMENT[derive_booking_status(record, now, window_days)]


def derive_status(record: StatusInput, now: datetime, projection: str = BOOKING_PROJECTION,
                  window_days: int = DEFAULT_EXPIRY_DAYS) -> str:
    if projection == PAYMENT_PROJECTION:
        return derive_payment_status(record, now, window_days).value
    if projection == BOOKING_PROJECTION:
        return derive_booking_status(record, now, window_days).value
    raise ValueError(f"unknown projection: {projection}")
