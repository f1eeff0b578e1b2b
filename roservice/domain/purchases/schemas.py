"""Purchase domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import clean_text


class PurchaseCreate(BaseModel):
    vendorName: str = Field(min_length=2, max_length=255)
    billNumber: str = Field(min_length=1, max_length=100)
    purchaseDate: datetime
    partId: int
    quantity: int = Field(ge=1)
    costPerUnit: float = Field(ge=0)
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, v):
        return clean_text(v)


class PurchaseResponse(BaseModel):
    id: int
    vendor_name: str
    bill_number: str
    part_id: int
    quantity: int
    cost_per_unit: float
    purchase_date: datetime
    notes: Optional[str] = None

    class Config:
        from_attributes = True
