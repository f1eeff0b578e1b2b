"""Report router - FastAPI endpoints for service reports"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_technician, get_current_user, require_admin
from ...database import get_db
from ...models import Technician, User
from .schemas import ReportCreate, ReportResponse, ReportUpdate
from .service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    """Dependency injection for ReportService"""
    return ReportService(db)


@router.post("", response_model=ReportResponse, status_code=201)
async def submit_report(
    data: ReportCreate,
    technician: Technician = Depends(get_current_technician),
    service: ReportService = Depends(get_report_service),
):
    """Submit a service report; listed parts are deducted from stock"""
    return ReportResponse.from_report(service.create_report(technician, data))


@router.get("", response_model=list[ReportResponse])
async def list_reports(
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return [ReportResponse.from_report(r) for r in service.list_reports(user)]


@router.get("/booking/{booking_id}", response_model=ReportResponse)
async def get_report_by_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return ReportResponse.from_report(service.get_report_by_booking(booking_id, user))


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: int,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return ReportResponse.from_report(service.get_report(report_id, user))


@router.put("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: int,
    data: ReportUpdate,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Edit a report; stock is reconciled against the new parts list"""
    return ReportResponse.from_report(service.update_report(report_id, user, data))


@router.delete("/{report_id}")
async def delete_report(
    report_id: int,
    _admin: User = Depends(require_admin),
    service: ReportService = Depends(get_report_service),
):
    service.delete_report(report_id)
    return {"success": True, "message": "Report deleted and stock restored"}
