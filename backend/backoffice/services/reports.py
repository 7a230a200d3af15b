from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any

from backoffice.services.lifecycle import DEFAULT_EXPIRY_DAYS, derive_booking_status
from backoffice.services.payments import to_payment_view
from backoffice.services.records import BookingRecord

SECTIONS = ("bookings", "payments")

BOOKING_HEADERS = ["ID", "Customer", "Package", "Destination", "Amount", "Status", "Travelers", "Travel Date", "Booking Date"]
PAYMENT_HEADERS = [
    "ID", "Customer", "Package", "Amount", "Payment Status", "Payment Method", "Payment Date",
    "Due Date", "Transaction ID", "Assigned Employee", "Employee Mobile",
]

NA = "N/A"


def _na(value: Any) -> Any:
    if value is None or value == "":
        return NA
    return value


def _day(value) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else NA


def booking_row(record: BookingRecord, now: datetime, window_days: int = DEFAULT_EXPIRY_DAYS) -> dict[str, Any]:
    return {
        "ID": record.id,
        "Customer": _na(record.customer),
        "Package": _na(record.package_name),
        "Destination": _na(record.destination),
        "Amount": str(record.amount),
        "Status": derive_booking_status(record, now, window_days).value,
        "Travelers": record.travelers,
        "Travel Date": _day(record.travel_date),
        "Booking Date": _day(record.booking_date or now),
    }


def payment_row(record: BookingRecord, now: datetime, agent_phones: dict[str, str] | None = None,
                window_days: int = DEFAULT_EXPIRY_DAYS) -> dict[str, Any]:
    view = to_payment_view(record, now, window_days)
    phones = agent_phones or {}
    return {
        "ID": view.booking_id,
        "Customer": _na(view.customer),
        "Package": _na(view.package_name),
        "Amount": str(view.amount),
        "Payment Status": view.status.value,
        "Payment Method": view.payment_method,
        "Payment Date": _day(view.payment_date),
        "Due Date": _day(view.due_date),
        "Transaction ID": _na(view.transaction_id),
        "Assigned Employee": _na(view.assigned_agent),
        "Employee Mobile": _na(phones.get(view.assigned_agent or "")),
    }


def build_rows(section: str, records: list[BookingRecord], now: datetime,
               agent_phones: dict[str, str] | None = None,
               window_days: int = DEFAULT_EXPIRY_DAYS) -> tuple[list[str], list[dict[str, Any]]]:
    if section == "bookings":
        return BOOKING_HEADERS, [booking_row(r, now, window_days) for r in records]
    if section == "payments":
        return PAYMENT_HEADERS, [payment_row(r, now, agent_phones, window_days) for r in records]
    raise ValueError(f"unknown report section: {section}")


def to_csv(headers: list[str], rows: list[dict[str, Any]]) -> bytes:
    buf = io.StringIO()
    w = csv.DictWriter(buf, fieldnames=headers, quoting=csv.QUOTE_ALL)
    w.writeheader()
    for r in rows:
        w.writerow(r)
    # BOM so spreadsheet apps detect UTF-8
    return buf.getvalue().encode("utf-8-sig")


def report_filename(section: str, now: datetime, month: int | None = None, year: int | None = None) -> str:
    month_part = str(month) if month is not None else "All-Months"
    year_part = str(year) if year is not None else "All-Years"
    return f"{section.upper()}-Report-{month_part}-{year_part}-{now.strftime('%Y-%m-%d')}.csv"
