"""Booking domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import BookingStatus, ServiceType
from ...shared.validators import clean_text, validate_phone
from ..stock.schemas import PartQuantity


class BookingContactFields(BaseModel):
    """On-site contact details, stored as columns and rendered into remarks"""

    name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = None
    address: Optional[str] = None
    problem: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("name", "address", "problem")
    @classmethod
    def validate_text(cls, v):
        return clean_text(v)


class BookingCreate(BookingContactFields):
    """Schema for creating a new booking"""

    serviceType: ServiceType
    serviceDate: datetime
    remarks: Optional[str] = None

    @field_validator("remarks")
    @classmethod
    def validate_remarks(cls, v):
        return clean_text(v)


class BookingDetailsUpdate(BookingContactFields):
    """Schema for updating booking contact details"""


class AssignTechnicianRequest(BaseModel):
    technicianId: int


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class BookingPartsRequest(BaseModel):
    parts: list[PartQuantity] = Field(min_length=1)


class TechnicianSummary(BaseModel):
    id: int
    name: str
    phone: str

    class Config:
        from_attributes = True


class CustomerSummary(BaseModel):
    id: int
    name: str
    email: str
    phone: str

    class Config:
        from_attributes = True


class BookingPartResponse(BaseModel):
    id: int
    part_id: int
    part_name: Optional[str] = None
    quantity: int


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: int
    user_id: int
    technician_id: Optional[int] = None
    service_type: ServiceType
    status: BookingStatus
    service_date: datetime
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    problem: Optional[str] = None
    remarks: Optional[str] = None
    reminder_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    customer: Optional[CustomerSummary] = None
    technician: Optional[TechnicianSummary] = None
    booking_parts: list[BookingPartResponse] = []
    report_id: Optional[int] = None

    @classmethod
    def from_booking(cls, booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            user_id=booking.user_id,
            technician_id=booking.technician_id,
            service_type=booking.service_type,
            status=booking.status,
            service_date=booking.service_date,
            contact_name=booking.contact_name,
            contact_phone=booking.contact_phone,
            address=booking.address,
            problem=booking.problem,
            remarks=booking.remarks,
            reminder_sent_at=booking.reminder_sent_at,
            created_at=booking.created_at,
            customer=CustomerSummary.model_validate(booking.user) if booking.user else None,
            technician=(
                TechnicianSummary.model_validate(booking.technician) if booking.technician else None
            ),
            booking_parts=[
                BookingPartResponse(
                    id=bp.id,
                    part_id=bp.part_id,
                    part_name=bp.part.name if bp.part else None,
                    quantity=bp.quantity,
                )
                for bp in booking.booking_parts
            ],
            report_id=booking.report.id if booking.report else None,
        )
