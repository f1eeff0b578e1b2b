"""Booking router - FastAPI endpoints for the booking lifecycle"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...email_service import Mailer, get_mailer
from ...models import User
from .schemas import (
    AssignTechnicianRequest,
    BookingCreate,
    BookingDetailsUpdate,
    BookingPartsRequest,
    BookingResponse,
    BookingStatusUpdate,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(
    db: Session = Depends(get_db),
    mailer: Optional[Mailer] = Depends(get_mailer),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, mailer)


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.create_booking(user, data)
    return BookingResponse.from_booking(booking)


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """All bookings, newest first (admin)"""
    return [BookingResponse.from_booking(b) for b in service.list_all()]


@router.get("/my", response_model=list[BookingResponse])
async def my_bookings(
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return [BookingResponse.from_booking(b) for b in service.list_for_user(user)]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(service.get_booking(booking_id, user))


@router.post("/{booking_id}/assign", response_model=BookingResponse)
async def assign_technician(
    booking_id: int,
    data: AssignTechnicianRequest,
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    """Assign a technician; the booking moves to IN_PROGRESS"""
    booking = service.assign_technician(booking_id, data.technicianId)
    return BookingResponse.from_booking(booking)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_status(
    booking_id: int,
    data: BookingStatusUpdate,
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.set_status(booking_id, data.status)
    return BookingResponse.from_booking(booking)


@router.patch("/{booking_id}/details", response_model=BookingResponse)
async def update_details(
    booking_id: int,
    data: BookingDetailsUpdate,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.update_details(booking_id, user, data)
    return BookingResponse.from_booking(booking)


@router.post("/{booking_id}/parts", response_model=BookingResponse)
async def add_parts(
    booking_id: int,
    data: BookingPartsRequest,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Record parts fitted on a booking and deduct them from stock"""
    booking = service.add_parts(booking_id, user, [(p.partId, p.quantity) for p in data.parts])
    return BookingResponse.from_booking(booking)


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    _admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    service.delete_booking(booking_id)
    return {"success": True, "message": "Booking deleted"}
