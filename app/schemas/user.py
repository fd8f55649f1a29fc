from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional

PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=2)
    last_name: str = Field(..., min_length=2)
    phone_number: str = Field(..., pattern=PHONE_PATTERN)
    role: Literal["buyer", "vendor", "admin"]

    class Config:
        extra = "forbid"

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2)
    last_name: Optional[str] = Field(None, min_length=2)
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)

    class Config:
        extra = "forbid"

class UserResponse(BaseModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    phone_number: Optional[str]
    role: str

    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

# Admin edits any user, including the role
class AdminUserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2)
    last_name: Optional[str] = Field(None, min_length=2)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    role: Optional[Literal["buyer", "vendor", "admin"]] = None

    class Config:
        extra = "forbid"

class UserListResponse(BaseModel):
    users: List[UserResponse]
    current_page: int
    total_pages: int
    total_users: int
