"""Canonical booking record built at the store boundary.

Rows reach us either as ORM objects or as loosely typed mappings written by
older clients (``paymentStatus`` / ``bookingDate`` style keys). They are
normalized here once so that the lifecycle and aggregation code only ever sees
one shape.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from backoffice.services.lifecycle import coerce_datetime

ZERO = Decimal("0")
# largest value a Numeric(12, 2) column holds
MAX_AMOUNT = Decimal("9999999999.99")

# canonical name -> accepted source names, first non-empty wins
FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    "raw_payment_flag": ("payment_status", "paymentStatus"),
    "booking_date": ("booking_date", "bookingDate", "created_at", "createdAt"),
    "package_name": ("package_name", "package", "packageName"),
    "travel_date": ("travel_date", "travelDate"),
    "payment_method": ("payment_method", "paymentMethod"),
    "payment_date": ("payment_date", "paymentDate"),
    "due_date": ("due_date", "dueDate"),
    "transaction_id": ("transaction_id", "transactionId"),
    "assigned_agent": ("assigned_agent", "assignedAgent"),
}


@dataclass(frozen=True)
class BookingRecord:
    id: int | None
    customer: str = ""
    email: str = ""
    phone: str = ""
    package_name: str = ""
    destination: str = ""
    travelers: int = 1
    amount: Decimal = ZERO
    raw_payment_flag: str | None = None
    booking_date: datetime | None = None
    travel_date: date | None = None
    payment_method: str | None = None
    payment_date: datetime | None = None
    due_date: date | None = None
    transaction_id: str | None = None
    assigned_agent: str | None = None


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _lookup(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _first(row: Any, *names: str) -> Any:
    for name in names:
        value = _lookup(row, name)
        if not _is_empty(value):
            return value
    return None


def _field(row: Any, canonical: str) -> Any:
    return _first(row, *FIELD_SYNONYMS.get(canonical, (canonical,)))


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _optional_text(value: Any) -> str | None:
    s = _text(value)
    return s or None


def _raw_flag(value: Any) -> str | None:
    return None if value is None else str(value)


def _as_date(value: Any) -> date | None:
    parsed = coerce_datetime(value)
    return parsed.date() if parsed else None


def parse_amount(value: Any) -> Decimal:
    """Monetary amount of a row; anything unusable counts as zero.

    Numbers and numeric strings parse. None, empty strings, garbage, NaN,
    infinities, negative values and values above ``MAX_AMOUNT`` all yield
    ``Decimal(0)``, so sums stay within decimal context precision.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip().replace(",", ""))
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite() or amount < 0 or amount > MAX_AMOUNT:
        return ZERO
    return amount


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_record(row: Any) -> BookingRecord:
    raw_id = _lookup(row, "id")
    return BookingRecord(
        id=_as_int(raw_id, 0) if raw_id is not None else None,
        customer=_text(_first(row, "customer", "customer_name", "name")),
        email=_text(_lookup(row, "email")),
        phone=_text(_lookup(row, "phone")),
        package_name=_text(_field(row, "package_name")),
        destination=_text(_lookup(row, "destination")),
        travelers=_as_int(_lookup(row, "travelers"), 1),
        amount=parse_amount(_lookup(row, "amount")),
        # kept verbatim, "Paid " or "paid" are not paid
        raw_payment_flag=_raw_flag(_field(row, "raw_payment_flag")),
        booking_date=coerce_datetime(_field(row, "booking_date")),
        travel_date=_as_date(_field(row, "travel_date")),
        payment_method=_optional_text(_field(row, "payment_method")),
        payment_date=coerce_datetime(_field(row, "payment_date")),
        due_date=_as_date(_field(row, "due_date")),
        transaction_id=_optional_text(_field(row, "transaction_id")),
        assigned_agent=_optional_text(_field(row, "assigned_agent")),
    )


def normalize_records(rows) -> list[BookingRecord]:
    return [normalize_record(r) for r in rows]
