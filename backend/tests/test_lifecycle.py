from datetime import date, datetime, timedelta, timezone

import pytest

from backoffice.services.lifecycle import (
    BOOKING_PROJECTION,
    PAYMENT_PROJECTION,
    BookingStatus,
    PaymentStatus,
    age_in_days,
    coerce_datetime,
    derive_booking_status,
    derive_payment_status,
    derive_status,
    is_expired,
    parse_reference_date,
)
from backoffice.services.records import normalize_record

NOW = datetime(2024, 6, 1, 12, 0, 0)


def rec(flag, booking_date):
    return normalize_record({"id": 1, "amount": 100, "payment_status": flag, "booking_date": booking_date})


def test_coerce_datetime_formats():
    assert coerce_datetime("2024-01-01") == datetime(2024, 1, 1)
    assert coerce_datetime("2024-01-01T10:00:00Z") == datetime(2024, 1, 1, 10, 0)
    assert coerce_datetime("2024-01-01T10:00:00+05:30") == datetime(2024, 1, 1, 4, 30)
    assert coerce_datetime(date(2024, 2, 3)) == datetime(2024, 2, 3)
    assert coerce_datetime(datetime(2024, 1, 1, 5, tzinfo=timezone.utc)) == datetime(2024, 1, 1, 5)
    assert coerce_datetime("not-a-date") is None
    assert coerce_datetime("") is None
    assert coerce_datetime(12345) is None


def test_missing_or_invalid_reference_date_is_now():
    assert parse_reference_date(None, NOW) == NOW
    assert parse_reference_date("garbage", NOW) == NOW
    assert age_in_days(None, NOW) == 0
    assert age_in_days("31/12/2023", NOW) == 0


def test_age_is_floored():
    assert age_in_days(NOW - timedelta(days=2, hours=23), NOW) == 2
    assert age_in_days(NOW - timedelta(days=3), NOW) == 3
    # future dates give negative ages, never expired
    assert age_in_days(NOW + timedelta(days=5), NOW) == -5
    assert not is_expired(NOW + timedelta(days=500), NOW)


def test_expiry_boundary_is_strict():
    assert derive_booking_status(rec("Pending", NOW - timedelta(days=30)), NOW) is BookingStatus.PENDING
    assert derive_booking_status(rec("Pending", NOW - timedelta(days=30, hours=23)), NOW) is BookingStatus.PENDING
    assert derive_booking_status(rec("Pending", NOW - timedelta(days=31)), NOW) is BookingStatus.CANCELLED


@pytest.mark.parametrize("booking_date", [
    "2024-01-01",
    "1999-01-01",
    "2099-01-01",
    "not-a-date",
    None,
])
def test_paid_always_completed(booking_date):
    assert derive_booking_status(rec("Paid", booking_date), NOW) is BookingStatus.COMPLETED
    assert derive_payment_status(rec("Paid", booking_date), NOW) is PaymentStatus.PAID


@pytest.mark.parametrize("flag", ["paid", "PAID", "Paid ", "Completed", "", None, "Cancelled"])
def test_only_exact_paid_flag_counts(flag):
    assert derive_booking_status(rec(flag, "2024-05-30"), NOW) is BookingStatus.PENDING
    assert derive_booking_status(rec(flag, "2024-01-01"), NOW) is BookingStatus.CANCELLED


def test_invalid_date_unpaid_is_pending():
    assert derive_booking_status(rec("Pending", "garbage"), NOW) is BookingStatus.PENDING


def test_reference_examples():
    assert derive_booking_status(rec("Paid", "2024-01-01"), datetime(2024, 6, 1)) is BookingStatus.COMPLETED
    assert derive_booking_status(rec("Pending", "2024-01-01"), datetime(2024, 3, 15)) is BookingStatus.CANCELLED
    assert derive_booking_status(rec("Pending", "2024-03-01"), datetime(2024, 3, 20)) is BookingStatus.PENDING


def test_payment_projection_mirrors_booking_projection():
    pairs = {
        BookingStatus.COMPLETED: PaymentStatus.PAID,
        BookingStatus.CANCELLED: PaymentStatus.CANCELLED,
        BookingStatus.PENDING: PaymentStatus.PENDING,
    }
    for r in (rec("Paid", "2020-01-01"), rec("Pending", "2020-01-01"), rec("Pending", "2024-05-31")):
        assert pairs[derive_booking_status(r, NOW)] is derive_payment_status(r, NOW)


def test_custom_window():
    r = rec("Pending", NOW - timedelta(days=10))
    assert derive_booking_status(r, NOW, window_days=7) is BookingStatus.CANCELLED
    assert derive_booking_status(r, NOW, window_days=10) is BookingStatus.PENDING


def test_derive_status_is_deterministic():
    r = rec("Pending", "2024-04-15")
    first = [derive_status(r, NOW, p) for p in (BOOKING_PROJECTION, PAYMENT_PROJECTION)]
    for _ in range(5):
        assert [derive_status(r, NOW, p) for p in (BOOKING_PROJECTION, PAYMENT_PROJECTION)] == first


def test_derive_status_unknown_projection():
    with pytest.raises(ValueError):
        derive_status(rec("Paid", None), NOW, "invoices")
