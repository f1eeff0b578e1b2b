"""Dashboard router - Admin overview endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from ..bookings.schemas import BookingResponse
from ..stock.schemas import PartResponse
from .schemas import CustomerHistory, DashboardSummary
from .service import DashboardService

router = APIRouter(tags=["Dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    _admin: User = Depends(require_admin),
    service: DashboardService = Depends(get_dashboard_service),
):
    summary = service.summary()
    summary["lowStockAlert"] = [PartResponse.model_validate(p) for p in summary["lowStockAlert"]]
    return DashboardSummary(**summary)


@router.get("/due-services", response_model=list[BookingResponse])
async def get_due_services(
    _admin: User = Depends(require_admin),
    service: DashboardService = Depends(get_dashboard_service),
):
    return [BookingResponse.from_booking(b) for b in service.due_services()]


@router.get("/history", response_model=list[CustomerHistory])
async def get_history(
    query: Optional[str] = Query(default=None, max_length=100),
    _admin: User = Depends(require_admin),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Customer service history, optionally filtered by name or phone"""
    return [CustomerHistory.from_user(user, bookings) for user, bookings in service.customer_history(query)]
