"""Counts and sums over derived booking statuses.

Dashboard tiles, filter-tab badges and report headers all go through these
helpers so that they agree with the per-row status shown next to them.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime
from decimal import Decimal

from backoffice.services.lifecycle import (
    BOOKING_PROJECTION,
    DEFAULT_EXPIRY_DAYS,
    PAYMENT_PROJECTION,
    STATUSES_BY_PROJECTION,
    PaymentStatus,
    derive_status,
    parse_reference_date,
)
from backoffice.services.records import ZERO, BookingRecord

CENT = Decimal("0.01")


def _statuses(projection: str) -> tuple[str, ...]:
    try:
        return STATUSES_BY_PROJECTION[projection]
    except KeyError:
        raise ValueError(f"unknown projection: {projection}") from None


def count_by_status(records: Iterable[BookingRecord], now: datetime, projection: str = BOOKING_PROJECTION,
                    window_days: int = DEFAULT_EXPIRY_DAYS) -> dict[str, int]:
    counts = {s: 0 for s in _statuses(projection)}
    for r in records:
        counts[derive_status(r, now, projection, window_days)] += 1
    return counts


def sum_revenue(records: Iterable[BookingRecord], status_filter: str, now: datetime,
                projection: str = BOOKING_PROJECTION, window_days: int = DEFAULT_EXPIRY_DAYS) -> Decimal:
    """Sum of amounts of the records whose derived status is ``status_filter``.

    Amounts were already coerced by the record adapter, so malformed values
    add zero here while the record is still counted by :func:`count_by_status`.
    """
    wanted = str(getattr(status_filter, "value", status_filter))
    total = ZERO
    for r in records:
        if derive_status(r, now, projection, window_days) == wanted:
            total += r.amount
    return total.quantize(CENT)


def outstanding_amount(records: Iterable[BookingRecord], now: datetime,
                       window_days: int = DEFAULT_EXPIRY_DAYS) -> Decimal:
    total = ZERO
    for r in records:
        if derive_status(r, now, PAYMENT_PROJECTION, window_days) != PaymentStatus.PAID.value:
            total += r.amount
    return total.quantize(CENT)


def _due_reference(record: BookingRecord, now: datetime) -> datetime:
    if record.due_date is not None:
        return parse_reference_date(record.due_date, now)
    return parse_reference_date(record.booking_date, now)


def overdue_count(records: Iterable[BookingRecord], now: datetime,
                  window_days: int = DEFAULT_EXPIRY_DAYS) -> int:
    n = 0
    for r in records:
        if derive_status(r, now, PAYMENT_PROJECTION, window_days) == PaymentStatus.PAID.value:
            continue
        if _due_reference(r, now) < parse_reference_date(now, now):
            n += 1
    return n


def booking_date_of(record: BookingRecord) -> datetime | None:
    return record.booking_date


def payment_date_of(record: BookingRecord) -> datetime | date | None:
    # payments screen groups by payment date, falling back to the due date
    return record.payment_date or record.due_date or record.booking_date


def filter_by_period(records: Iterable[BookingRecord], now: datetime, month: int | None = None,
                     year: int | None = None, day: date | None = None,
                     date_of: Callable[[BookingRecord], datetime | date | None] = booking_date_of) -> list[BookingRecord]:
    """Calendar filter used by the list screens and reports.

    Records without a usable date are filed under ``now``.
    """
    out = []
    for r in records:
        ref = parse_reference_date(date_of(r), now)
        if month is not None and ref.month != month:
            continue
        if year is not None and ref.year != year:
            continue
        if day is not None and ref.date() != day:
            continue
        out.append(r)
    return out


def filter_by_status(records: Iterable[BookingRecord], status: str | None, now: datetime,
                     projection: str = BOOKING_PROJECTION, window_days: int = DEFAULT_EXPIRY_DAYS) -> list[BookingRecord]:
    if status is None or status.strip().lower() in ("", "all"):
        return list(records)
    wanted = status.strip().lower()
    return [r for r in records if derive_status(r, now, projection, window_days).lower() == wanted]


def summarize(records: Iterable[BookingRecord], now: datetime, projection: str = BOOKING_PROJECTION,
              window_days: int = DEFAULT_EXPIRY_DAYS) -> dict:
    items = list(records)
    revenue_status = _statuses(projection)[0]  # Completed / Paid
    return {
        "total": len(items),
        "counts": count_by_status(items, now, projection, window_days),
        "revenue": sum_revenue(items, revenue_status, now, projection, window_days),
        "pending_amount": outstanding_amount(items, now, window_days),
        "overdue": overdue_count(items, now, window_days),
    }
