from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import date, datetime
from typing import List, Literal, Optional

MAX_BOOKING_DAYS = 365

# --- CREATE ---
class BookingCreate(BaseModel):
    hoarding_id: int
    start_date: date
    end_date: date
    notes: Optional[str] = Field(default=None, max_length=500)

    class Config:
        extra = "forbid"

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, v):
        return v.strip() if v else v

    @field_validator("start_date")
    @classmethod
    def start_not_in_past(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("Start date must be today or in the future")
        return v

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        if (self.end_date - self.start_date).days > MAX_BOOKING_DAYS:
            raise ValueError(f"Booking duration cannot exceed {MAX_BOOKING_DAYS} days")
        return self


# --- UPDATE (Vendor or Buyer) ---
class BookingStatusUpdate(BaseModel):
    # any string: unknown targets are rejected by the lifecycle service
    status: str = Field(
        ...,
        description="Allowed values: accepted, rejected, completed, cancelled"
    )

    class Config:
        extra = "forbid"


class InstallationUpdate(BaseModel):
    scheduled_date: Optional[datetime] = None
    status: Optional[Literal["Pending", "Scheduled", "Completed", "Cancelled"]] = None
    notes: Optional[str] = Field(default=None, max_length=500)

    class Config:
        extra = "forbid"


class VerificationUpdate(BaseModel):
    status: Literal["Pending", "Verified", "Rejected"]
    notes: Optional[str] = Field(default=None, max_length=500)

    class Config:
        extra = "forbid"


# --- RESPONSE ---
class AdditionalCostSnapshot(BaseModel):
    name: str
    cost: float
    is_included: bool = False


class PricingSnapshot(BaseModel):
    base_price: float
    per: str
    additional_costs: List[AdditionalCostSnapshot]
    total_price: float


class ProofImage(BaseModel):
    url: str
    key: str
    uploaded_at: datetime


class ProofResponse(BaseModel):
    images: List[ProofImage]
    notes: Optional[str]


class InstallationResponse(BaseModel):
    scheduled_date: Optional[datetime]
    completed_date: Optional[datetime]
    status: str
    notes: Optional[str]


class VerificationResponse(BaseModel):
    status: str
    verified_by: Optional[int]
    verified_at: Optional[datetime]
    notes: Optional[str]


class BookingResponse(BaseModel):
    id: int
    hoarding_id: int
    buyer_id: int
    vendor_id: int
    start_date: date
    end_date: date
    notes: Optional[str]
    status: str
    pricing: PricingSnapshot
    installation: InstallationResponse
    verification: VerificationResponse
    proof: ProofResponse
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    current_page: int
    total_pages: int
    total_bookings: int


class CalendarEntry(BaseModel):
    id: int
    start_date: date
    end_date: date
    status: str

    class Config:
        from_attributes = True


class CalendarResponse(BaseModel):
    bookings: List[CalendarEntry]
