"""Stock domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import clean_text


class PartCreate(BaseModel):
    """Schema for creating a new part"""

    name: str = Field(min_length=2, max_length=255)
    description: Optional[str] = None
    unitCost: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = v.strip()
        # Part names appear in "name xQty" summaries
        if "," in v:
            raise ValueError("Part name must not contain commas")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_text(v)


class PartUpdate(BaseModel):
    """Schema for updating part details (not quantity)"""

    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    unitCost: Optional[float] = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        if "," in v:
            raise ValueError("Part name must not contain commas")
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return clean_text(v)


class StockAdjustRequest(BaseModel):
    """Signed quantity change with a reason"""

    quantity: int
    reason: str = Field(min_length=3, max_length=255)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v):
        if v == 0:
            raise ValueError("Quantity must not be zero")
        return v


class PartQuantity(BaseModel):
    """One line of a parts-used list"""

    partId: int
    quantity: int = Field(ge=1)


class StockLogResponse(BaseModel):
    id: int
    part_id: int
    change: int
    reason: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PartResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    unit_cost: float
    quantity: int
    initial_quantity: int

    class Config:
        from_attributes = True


class PartWithLogsResponse(PartResponse):
    stock_logs: list[StockLogResponse] = []


class StockAdjustResponse(BaseModel):
    success: bool = True
    message: str
    part_id: int
    quantity: int
