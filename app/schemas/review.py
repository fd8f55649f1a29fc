# app/schemas/review.py
from pydantic import BaseModel, Field, conint
from typing import List, Optional
from datetime import datetime

class ReviewCreate(BaseModel):
    hoarding_id: int
    booking_id: int
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = Field(None, max_length=1000)

    class Config:
        extra = "forbid"

class ReviewUpdate(BaseModel):
    rating: conint(ge=1, le=5) = Field(..., description="Rating 1-5")
    comment: Optional[str] = Field(None, max_length=1000)

    class Config:
        extra = "forbid"

class ReviewResponse(BaseModel):
    id: int
    hoarding_id: int
    booking_id: int
    buyer_id: int
    rating: int
    comment: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ReviewListResponse(BaseModel):
    reviews: List[ReviewResponse]
    current_page: int
    total_pages: int
    total_reviews: int
