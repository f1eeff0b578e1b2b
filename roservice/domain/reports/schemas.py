"""Report domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import clean_text, validate_phone
from ..stock.schemas import PartQuantity


class ReportCreate(BaseModel):
    """Service report submitted by a technician"""

    customerName: str = Field(min_length=2, max_length=255)
    mobileNumber: str
    address: str = Field(min_length=3)
    dateTime: datetime
    serviceType: str = Field(min_length=2, max_length=50)
    amountReceived: float = Field(default=0, ge=0)
    partsUsed: list[PartQuantity] = []
    remarks: Optional[str] = None
    bookingId: Optional[int] = None

    @field_validator("mobileNumber")
    @classmethod
    def validate_mobile(cls, v):
        return validate_phone(v)

    @field_validator("customerName", "address", "serviceType", "remarks")
    @classmethod
    def validate_text(cls, v):
        return clean_text(v)


class ReportUpdate(ReportCreate):
    """Full replacement of a report, parts list included"""


class ReportPartResponse(BaseModel):
    part_id: int
    part_name: Optional[str] = None
    quantity: int
    unit_cost: float


class ReportTechnician(BaseModel):
    id: int
    name: str
    phone: str

    class Config:
        from_attributes = True


class ReportResponse(BaseModel):
    """Schema for report response"""

    id: int
    technician_id: int
    booking_id: Optional[int] = None
    customer_name: str
    mobile_number: str
    address: str
    service_date_time: datetime
    service_type: str
    amount_received: float
    remarks: Optional[str] = None
    summary: str
    total_money: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    technician: Optional[ReportTechnician] = None
    parts: list[ReportPartResponse] = []

    @classmethod
    def from_report(cls, report) -> "ReportResponse":
        return cls(
            id=report.id,
            technician_id=report.technician_id,
            booking_id=report.booking_id,
            customer_name=report.customer_name,
            mobile_number=report.mobile_number,
            address=report.address,
            service_date_time=report.service_date_time,
            service_type=report.service_type,
            amount_received=report.amount_received,
            remarks=report.remarks,
            summary=report.summary,
            total_money=report.total_money,
            created_at=report.created_at,
            updated_at=report.updated_at,
            technician=ReportTechnician.model_validate(report.technician) if report.technician else None,
            parts=[
                ReportPartResponse(
                    part_id=rp.part_id,
                    part_name=rp.part.name if rp.part else None,
                    quantity=rp.quantity,
                    unit_cost=rp.unit_cost,
                )
                for rp in report.parts
            ],
        )
