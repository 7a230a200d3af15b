import logging
from datetime import datetime, timedelta
from decimal import Decimal

from backoffice.core.config import settings
from backoffice.core.security import get_password_hash
from backoffice.db.session import SessionLocal, engine
from backoffice.models import booking, employee  # noqa: F401
from backoffice.models.base import Base
from backoffice.models.booking import Booking
from backoffice.models.employee import Employee

logger = logging.getLogger(__name__)

def create_tables():
    Base.metadata.create_all(bind=engine)

def _demo_bookings(now: datetime) -> list[Booking]:
    # one booking per derived status: paid, unpaid within the window, unpaid past it
    return [
        Booking(customer="Rahul Sharma", email="rahul@example.com", phone="+919800000001",
                package_name="Kashmir Delight", destination="Kashmir", travelers=2,
                amount=Decimal("15000"), payment_status="Paid", payment_method="upi",
                payment_date=now - timedelta(days=3), transaction_id="pay_demo_1",
                assigned_agent="Demo Agent", booking_date=now - timedelta(days=5)),
        Booking(customer="Anita Rao", email="anita@example.com", phone="+919800000002",
                package_name="Goa Beach Escape", destination="Goa", travelers=4,
                amount=Decimal("5000"), payment_status="Pending",
                assigned_agent="Demo Agent", booking_date=now - timedelta(days=10)),
        Booking(customer="Vikram Singh", email="vikram@example.com",
                package_name="Ladakh Ride", destination="Ladakh", travelers=1,
                amount=Decimal("8000"), payment_status="Pending",
                booking_date=now - timedelta(days=45)),
    ]

def seed_demo_data():
    """Idempotent dev seed: admin, one agent and a few bookings."""
    db = SessionLocal()
    try:
        admin_email = (settings.seed_admin_email or "admin@example.com").lower()
        admin_pwd = settings.seed_admin_password or "Admin1234!"
        if not db.query(Employee).filter(Employee.email == admin_email).first():
            db.add(Employee(email=admin_email, full_name="Admin", hashed_password=get_password_hash(admin_pwd),
                            role="admin", is_active=True))
            db.commit()
            logger.info("Seeded admin employee %s", admin_email)

        if not db.query(Employee).filter(Employee.email == "agent@example.com").first():
            db.add(Employee(email="agent@example.com", full_name="Demo Agent", phone="+919811111111",
                            hashed_password=get_password_hash(admin_pwd), role="employee", is_active=True))
            db.commit()

        if db.query(Booking).count() == 0:
            db.add_all(_demo_bookings(datetime.utcnow()))
            db.commit()
            logger.info("Seeded demo bookings")
    finally:
        db.close()
