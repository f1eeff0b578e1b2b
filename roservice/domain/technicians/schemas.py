"""Technician domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import clean_text, validate_phone


class TechnicianCreate(BaseModel):
    """Schema for creating a technician profile"""

    name: str = Field(min_length=2, max_length=255)
    phone: str
    userId: Optional[int] = None  # TECHNICIAN login account to link

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_phone(v)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_text(v, max_length=255)


class TechnicianUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    phone: Optional[str] = None
    userId: Optional[int] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return clean_text(v, max_length=255)


class TechnicianResponse(BaseModel):
    id: int
    name: str
    phone: str
    user_id: Optional[int] = None
    total_jobs: int
    last_active: Optional[datetime] = None

    class Config:
        from_attributes = True


class TechnicianStats(BaseModel):
    technician_id: int
    total_jobs: int
    completed_jobs: int
    open_jobs: int
