from sqlalchemy import String, Integer, DateTime, Date, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime
from decimal import Decimal

from backoffice.models.base import Base

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    lead_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    customer: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str] = mapped_column(String(255), default="", index=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    package_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    package_name: Mapped[str] = mapped_column(String(255), default="")
    destination: Mapped[str] = mapped_column(String(255), default="", index=True)
    travelers: Mapped[int] = mapped_column(Integer, default=1)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0)
    # Legacy persisted status written by the checkout flow; display status is derived.
    status: Mapped[str] = mapped_column(String(32), default="Pending")
    # Raw payment flag: only the literal "Paid" means paid
    payment_status: Mapped[str | None] = mapped_column(String(32), nullable=True, default="Pending")
    payment_method: Mapped[str | None] = mapped_column(String(64), nullable=True)
    payment_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    transaction_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    payment_link_id: Mapped[str | None] = mapped_column(String(128), nullable=True, index=True)
    payment_link_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    assigned_agent: Mapped[str | None] = mapped_column(String(255), nullable=True)
    itinerary_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    travel_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    booking_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
