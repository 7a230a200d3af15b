from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from backoffice.services.lifecycle import DEFAULT_EXPIRY_DAYS, PaymentStatus, derive_payment_status
from backoffice.services.records import ZERO, BookingRecord

DEFAULT_METHOD = "UPI"

# checked in order; "netbanking" must be tested before "bank"
_METHOD_LABELS = (
    ("upi", "UPI"),
    ("credit", "Credit Card"),
    ("debit", "Debit Card"),
    ("netbanking", "Net Banking"),
    ("bank", "Bank Transfer"),
    ("wallet", "Digital Wallet"),
    ("cash", "Cash"),
)


def format_payment_method(method: str | None) -> str:
    if not method or not method.strip():
        return DEFAULT_METHOD
    lowered = method.lower()
    for needle, label in _METHOD_LABELS:
        if needle in lowered:
            return label
    return method


@dataclass(frozen=True)
class PaymentView:
    """Payments-screen projection of a booking."""

    booking_id: int | None
    customer: str
    email: str
    package_name: str
    destination: str
    amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    status: PaymentStatus
    payment_method: str
    payment_date: datetime | None
    due_date: date | None
    transaction_id: str | None
    assigned_agent: str | None


def to_payment_view(record: BookingRecord, now: datetime, window_days: int = DEFAULT_EXPIRY_DAYS) -> PaymentView:
    status = derive_payment_status(record, now, window_days)
    paid = status is PaymentStatus.PAID
    payment_date = record.payment_date
    if payment_date is None and paid:
        payment_date = record.booking_date
    due_date = record.due_date
    if due_date is None and record.booking_date is not None:
        due_date = record.booking_date.date()
    return PaymentView(
        booking_id=record.id,
        customer=record.customer,
        email=record.email,
        package_name=record.package_name,
        destination=record.destination,
        amount=record.amount,
        paid_amount=record.amount if paid else ZERO,
        remaining_amount=ZERO if paid else record.amount,
        status=status,
        payment_method=format_payment_method(record.payment_method),
        payment_date=payment_date,
        due_date=due_date,
        transaction_id=record.transaction_id,
        assigned_agent=record.assigned_agent,
    )
