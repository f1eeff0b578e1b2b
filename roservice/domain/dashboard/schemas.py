"""Dashboard domain schemas"""

from typing import Optional

from pydantic import BaseModel

from ..bookings.schemas import BookingResponse
from ..stock.schemas import PartResponse


class DashboardSummary(BaseModel):
    totalServicesToday: int
    pendingServices: int
    dueServices: int
    lowStockAlert: list[PartResponse]


class CustomerHistory(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    address: Optional[str] = None
    bookings: list[BookingResponse] = []

    @classmethod
    def from_user(cls, user, bookings) -> "CustomerHistory":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            address=user.address,
            bookings=[BookingResponse.from_booking(b) for b in bookings],
        )
