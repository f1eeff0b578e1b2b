"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import Role
from ...shared.validators import clean_text, validate_email, validate_phone


class UserSignup(BaseModel):
    name: str = Field(min_length=3, max_length=255)
    email: str
    password: str = Field(min_length=6, max_length=128)
    phone: str
    role: Role = Role.USER
    location: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        return validate_phone(v)

    @field_validator("name", "location", "address")
    @classmethod
    def validate_text(cls, v):
        return clean_text(v)


class UserProfileUpdate(BaseModel):
    """Schema for profile updates; every field is optional"""

    name: Optional[str] = Field(default=None, min_length=3, max_length=255)
    phone: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("name", "location", "address")
    @classmethod
    def validate_text(cls, v):
        return clean_text(v)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    location: Optional[str] = None
    address: Optional[str] = None
    profile_pic: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminCheckResponse(BaseModel):
    adminExists: bool
    adminCount: int
