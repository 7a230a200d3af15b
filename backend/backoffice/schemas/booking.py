from datetime import date
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

class BookingCreate(BaseModel):
    lead_id: Optional[int] = None
    customer: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    package_id: Optional[int] = None
    package_name: Optional[str] = None
    destination: Optional[str] = None
    travelers: int = Field(1, ge=1, le=100)
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    travel_date: Optional[date] = None
    due_date: Optional[date] = None
    assigned_agent: Optional[str] = None
    itinerary_details: Optional[str] = None
    payment_link_id: Optional[str] = None
    payment_link_url: Optional[str] = None

    @field_validator("customer", "email", "package_name", "destination")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if isinstance(v, str) else v

class BookingUpdate(BaseModel):
    payment_status: Optional[str] = None
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None

class PaymentLinkEntity(BaseModel):
    id: Optional[str] = None
    reference_id: Optional[str] = None

class PaymentEntity(BaseModel):
    id: Optional[str] = None
    method: Optional[str] = None
    payment_link_id: Optional[str] = None
    order_id: Optional[str] = None
    # the gateway sends [] when a payment has no notes
    notes: Union[dict, list] = {}

class PaymentLinkWrapper(BaseModel):
    entity: PaymentLinkEntity = PaymentLinkEntity()

class PaymentWrapper(BaseModel):
    entity: PaymentEntity = PaymentEntity()

class WebhookPayload(BaseModel):
    payment_link: Optional[PaymentLinkWrapper] = None
    payment: Optional[PaymentWrapper] = None

class PaymentWebhook(BaseModel):
    """Subset of the gateway webhook envelope we act on; unknown keys are ignored."""
    event: str
    payload: WebhookPayload = WebhookPayload()
