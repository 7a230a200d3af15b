import os

# must be set before the application modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("PAYMENT_WEBHOOK_SECRET", None)
os.environ.pop("SMTP_HOST", None)

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from backoffice.api.deps import request_now
from backoffice.core.security import create_access_token
from backoffice.db.session import SessionLocal, engine
from backoffice.main import app
from backoffice.models.base import Base
from backoffice.models.booking import Booking
from backoffice.models.employee import Employee

# every API test runs at this instant unless it overrides request_now itself
FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture(autouse=True)
def _database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    app.dependency_overrides[request_now] = lambda: FIXED_NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(email: str = "agent@example.com", role: str = "employee") -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=email, roles=[role])}"}


@pytest.fixture
def headers():
    return auth_headers()


@pytest.fixture
def admin_headers():
    return auth_headers("admin@example.com", "admin")


def add_booking(**fields) -> int:
    data = {
        "customer": "Test Customer",
        "email": "customer@example.com",
        "package_name": "Kerala Backwaters",
        "destination": "Kerala",
        "travelers": 2,
        "amount": Decimal("1000"),
        "payment_status": "Pending",
        "booking_date": FIXED_NOW,
        "created_at": FIXED_NOW,
        "updated_at": FIXED_NOW,
    }
    data.update(fields)
    db = SessionLocal()
    try:
        b = Booking(**data)
        db.add(b)
        db.commit()
        return b.id
    finally:
        db.close()


def add_employee(email: str, full_name: str, hashed_password: str = "x", role: str = "employee",
                 phone: str | None = None, is_active: bool = True) -> int:
    db = SessionLocal()
    try:
        e = Employee(email=email, full_name=full_name, hashed_password=hashed_password, role=role,
                     phone=phone, is_active=is_active)
        db.add(e)
        db.commit()
        return e.id
    finally:
        db.close()


@pytest.fixture
def sample_bookings():
    """The three reference bookings: paid long ago, unpaid past the window, unpaid within it."""
    return {
        "paid": add_booking(customer="Paid Old", amount=Decimal("15000"), payment_status="Paid",
                            booking_date=datetime(2024, 1, 1)),
        "expired": add_booking(customer="Unpaid Old", amount=Decimal("8000"), payment_status="Pending",
                               booking_date=datetime(2024, 3, 15)),
        "pending": add_booking(customer="Unpaid Recent", amount=Decimal("5000"), payment_status="Pending",
                               booking_date=datetime(2024, 5, 20)),
    }
