# app/schemas/hoarding.py

from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime

MediaType = Literal[
    "Static Billboard",
    "Digital OOH (DOOH)",
    "Transit",
    "Street Furniture",
    "Wallscape",
    "Gantry",
    "Other",
]
PricingUnit = Literal["day", "week", "month", "slot"]


class AdditionalCost(BaseModel):
    name: str = Field(..., min_length=1)
    cost: float = Field(..., ge=0)
    is_included: bool = False

    class Config:
        extra = "forbid"


class Pricing(BaseModel):
    base_price: float = Field(..., ge=0)
    per: PricingUnit = "month"
    additional_costs: List[AdditionalCost] = []

    class Config:
        extra = "forbid"


class MediaItem(BaseModel):
    media_type: Literal["image", "video", "360-view"] = "image"
    url: str
    caption: Optional[str] = None

    class Config:
        extra = "forbid"


# Shared fields
class HoardingBase(BaseModel):
    name: str = Field(..., min_length=3)
    description: str = Field(..., min_length=10)
    media_type: MediaType = "Static Billboard"
    address: str = Field(..., min_length=1)
    landmark: Optional[str] = None
    area: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    units: Literal["ft", "m"] = "ft"
    media: List[MediaItem] = []


# Vendor creates hoarding
class HoardingCreate(HoardingBase):
    pricing: Pricing

    class Config:
        extra = "forbid"


# columns a partial update may not clear
NON_NULLABLE_FIELDS = (
    "name", "description", "media_type", "address", "area", "city", "state",
    "width", "height", "units", "media", "pricing",
)


# Vendor updates hoarding
class HoardingUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3)
    description: Optional[str] = Field(None, min_length=10)
    media_type: Optional[MediaType] = None
    address: Optional[str] = None
    landmark: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    units: Optional[Literal["ft", "m"]] = None
    media: Optional[List[MediaItem]] = None
    pricing: Optional[Pricing] = None

    class Config:
        extra = "forbid"

    @field_validator(*NON_NULLABLE_FIELDS)
    @classmethod
    def refuse_null(cls, v, info):
        # omit a field to keep it; null would blank a required column
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


# Admin moderation
class HoardingStatusUpdate(BaseModel):
    status: Literal["approved", "rejected"]

    class Config:
        extra = "forbid"


class PricingResponse(BaseModel):
    base_price: Optional[float]
    per: str
    additional_costs: List[AdditionalCost]


# What API returns
class HoardingResponse(BaseModel):
    id: int
    vendor_id: int

    name: str
    description: str
    media_type: str
    address: str
    landmark: Optional[str]
    area: str
    city: str
    state: str
    latitude: Optional[float]
    longitude: Optional[float]
    width: float
    height: float
    units: str
    aspect_ratio: Optional[str]
    media: List[MediaItem]

    pricing: PricingResponse
    status: str
    average_rating: float
    review_count: int

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class HoardingListResponse(BaseModel):
    hoardings: List[HoardingResponse]
    current_page: int
    total_pages: int
    total_hoardings: int
