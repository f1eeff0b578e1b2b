"""Technician service - Profiles, self-service views and stats"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import Conflict, NotFound, ValidationFailed
from ...models import Booking, BookingStatus, Role, Technician, User
from ..bookings.repository import BookingRepository
from .repository import TechnicianRepository
from .schemas import TechnicianCreate, TechnicianStats, TechnicianUpdate

logger = logging.getLogger(__name__)


class TechnicianService:
    """Service layer for technicians"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TechnicianRepository()

    def _check_linkable_user(self, user_id: int, technician_id: Optional[int] = None) -> None:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")
        if user.role != Role.TECHNICIAN:
            raise ValidationFailed("Only TECHNICIAN accounts can be linked to a technician profile")
        linked = self.repo.get_by_user_id(self.db, user_id)
        if linked and linked.id != technician_id:
            raise Conflict(f"User {user_id} is already linked to technician {linked.id}")

    def list_technicians(self) -> list[Technician]:
        return self.repo.get_technicians(self.db)

    def get_technician(self, technician_id: int) -> Technician:
        technician = self.repo.get_technician(self.db, technician_id)
        if not technician:
            raise NotFound("Technician not found")
        return technician

    def create_technician(self, data: TechnicianCreate) -> Technician:
        if data.userId is not None:
            self._check_linkable_user(data.userId)

        technician = self.repo.create_technician(
            self.db, name=data.name, phone=data.phone, user_id=data.userId, total_jobs=0
        )
        self.db.commit()
        self.db.refresh(technician)
        logger.info(f"👷 Technician created: {technician.name} (id {technician.id})")
        return technician

    def update_technician(self, technician_id: int, data: TechnicianUpdate) -> Technician:
        technician = self.get_technician(technician_id)
        if data.userId is not None:
            self._check_linkable_user(data.userId, technician.id)
            technician.user_id = data.userId
        if data.name is not None:
            technician.name = data.name
        if data.phone is not None:
            technician.phone = data.phone

        self.db.commit()
        self.db.refresh(technician)
        return technician

    def delete_technician(self, technician_id: int) -> None:
        """Delete a technician; assigned bookings keep running unassigned"""
        technician = self.get_technician(technician_id)
        if self.repo.count_reports(self.db, technician.id):
            raise Conflict("Technician has service reports and cannot be deleted")

        unlinked = self.repo.unlink_bookings(self.db, technician.id)
        self.db.delete(technician)
        self.db.commit()
        logger.info(f"🗑️ Technician {technician_id} deleted, {unlinked} booking(s) unlinked")

    def my_bookings(self, technician: Technician) -> list[Booking]:
        """Assigned bookings; viewing them counts as activity"""
        technician.last_active = datetime.now(timezone.utc).replace(tzinfo=None)
        self.db.commit()
        return BookingRepository.get_technician_bookings(self.db, technician.id)

    def stats(self, technician: Technician) -> TechnicianStats:
        return TechnicianStats(
            technician_id=technician.id,
            total_jobs=technician.total_jobs,
            completed_jobs=self.repo.count_bookings(self.db, technician.id, BookingStatus.COMPLETED),
            open_jobs=self.repo.count_bookings(self.db, technician.id, BookingStatus.IN_PROGRESS),
        )
