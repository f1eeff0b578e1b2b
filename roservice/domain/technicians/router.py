"""Technician router - Admin management and technician self-service"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_technician, require_admin
from ...database import get_db
from ...models import Technician, User
from ..bookings.schemas import BookingResponse
from .schemas import TechnicianCreate, TechnicianResponse, TechnicianStats, TechnicianUpdate
from .service import TechnicianService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/technicians", tags=["Technicians"])


def get_technician_service(db: Session = Depends(get_db)) -> TechnicianService:
    """Dependency injection for TechnicianService"""
    return TechnicianService(db)


# Self-service routes are declared before /{technician_id}


@router.get("/me", response_model=TechnicianResponse)
async def get_my_profile(technician: Technician = Depends(get_current_technician)):
    return technician


@router.get("/me/bookings", response_model=list[BookingResponse])
async def get_my_bookings(
    technician: Technician = Depends(get_current_technician),
    service: TechnicianService = Depends(get_technician_service),
):
    """Bookings assigned to the calling technician"""
    return [BookingResponse.from_booking(b) for b in service.my_bookings(technician)]


@router.get("/me/stats", response_model=TechnicianStats)
async def get_my_stats(
    technician: Technician = Depends(get_current_technician),
    service: TechnicianService = Depends(get_technician_service),
):
    return service.stats(technician)


@router.get("", response_model=list[TechnicianResponse])
async def list_technicians(
    _admin: User = Depends(require_admin),
    service: TechnicianService = Depends(get_technician_service),
):
    return service.list_technicians()


@router.post("", response_model=TechnicianResponse, status_code=201)
async def create_technician(
    data: TechnicianCreate,
    _admin: User = Depends(require_admin),
    service: TechnicianService = Depends(get_technician_service),
):
    return service.create_technician(data)


@router.get("/{technician_id}", response_model=TechnicianResponse)
async def get_technician(
    technician_id: int,
    _admin: User = Depends(require_admin),
    service: TechnicianService = Depends(get_technician_service),
):
    return service.get_technician(technician_id)


@router.put("/{technician_id}", response_model=TechnicianResponse)
async def update_technician(
    technician_id: int,
    data: TechnicianUpdate,
    _admin: User = Depends(require_admin),
    service: TechnicianService = Depends(get_technician_service),
):
    return service.update_technician(technician_id, data)


@router.delete("/{technician_id}")
async def delete_technician(
    technician_id: int,
    _admin: User = Depends(require_admin),
    service: TechnicianService = Depends(get_technician_service),
):
    service.delete_technician(technician_id)
    return {"success": True, "message": "Technician deleted"}
