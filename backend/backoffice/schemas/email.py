from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

class Member(BaseModel):
    name: str = ""
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    lead_id: Optional[str] = Field(default=None, alias="leadId")
    destination: Optional[str] = None
    travel_date: Optional[str] = Field(default=None, alias="travelDate")
    travelers: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"populate_by_name": True}

class HotelInfo(BaseModel):
    name: str
    map_rate: Decimal = Field(alias="mapRate")
    eb: Decimal = Decimal("0")
    category: str = ""

    model_config = {"populate_by_name": True}

class VehicleInfo(BaseModel):
    type: str
    rate: Decimal
    ac_extra: Decimal = Field(default=Decimal("0"), alias="acExtra")

    model_config = {"populate_by_name": True}

class FixedPlanInfo(BaseModel):
    days: int
    adults: int
    price_per_person: Decimal = Field(alias="pricePerPerson")

    model_config = {"populate_by_name": True}

class ItineraryInfo(BaseModel):
    name: str = ""
    destination: str = ""
    plan_type: Optional[str] = Field(default=None, alias="planType")
    service_type: Optional[str] = Field(default=None, alias="serviceType")
    hotel: Optional[HotelInfo] = None
    vehicle: Optional[VehicleInfo] = None
    fixed_plan: Optional[FixedPlanInfo] = Field(default=None, alias="fixedPlan")

    model_config = {"populate_by_name": True}

class PaymentInfo(BaseModel):
    amount: Optional[Decimal] = None
    payment_link: Optional[str] = Field(default=None, alias="paymentLink")

    model_config = {"populate_by_name": True}

class PaymentLinkEmail(BaseModel):
    member: Member = Member()
    itinerary: ItineraryInfo = ItineraryInfo()
    payment: PaymentInfo = PaymentInfo()

class EmailSent(BaseModel):
    success: bool
    message_id: str
