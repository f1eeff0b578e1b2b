"""Booking service - Business logic for the booking lifecycle"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...email_service import Mailer
from ...errors import Conflict, InvalidTransition, NotFound, ServiceError, Unauthorized
from ...models import Booking, BookingStatus, Role, Technician, User
from ...services.notification_service import NotificationService
from ...shared.remarks import decode_remarks, encode_remarks
from ..stock.ledger import REASON_USED_IN_BOOKING, StockLedger
from .lifecycle import ASSIGNABLE_STATUSES, ensure_transition
from .repository import BookingRepository
from .schemas import BookingCreate, BookingDetailsUpdate

logger = logging.getLogger(__name__)

REASON_BOOKING_DELETED = "Booking deleted"

CONTACT_FIELDS = ("name", "phone", "address", "problem")


class BookingService:
    """Service layer for bookings"""

    def __init__(self, db: Session, mailer: Optional[Mailer] = None):
        self.db = db
        self.repo = BookingRepository()
        self.ledger = StockLedger(db)
        self.notifier = NotificationService(db, mailer)

    def _load(self, booking_id: int) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        return booking

    def _apply_contact(self, booking: Booking, fields: dict, rendered: Optional[dict] = None) -> None:
        """Store contact fields as columns and re-render remarks"""
        if fields.get("name") is not None:
            booking.contact_name = fields["name"]
        if fields.get("phone") is not None:
            booking.contact_phone = fields["phone"]
        if fields.get("address") is not None:
            booking.address = fields["address"]
        if fields.get("problem") is not None:
            booking.problem = fields["problem"]
        booking.remarks = encode_remarks(fields if rendered is None else rendered, existing=booking.remarks)

    def create_booking(self, user: User, data: BookingCreate) -> Booking:
        """
        Create a PENDING booking for the caller

        Contact details come from the structured fields first, then from
        "Key: value" pairs in free-text remarks, then from the user profile.
        """
        decoded = decode_remarks(data.remarks)
        fields = {}
        from_remarks = set()
        for field in CONTACT_FIELDS:
            value = getattr(data, field)
            if value is None and field in decoded:
                value = decoded[field]
                from_remarks.add(field)
            fields[field] = value
        if fields["name"] is None:
            fields["name"] = user.name
        if fields["phone"] is None:
            fields["phone"] = user.phone
        if fields["address"] is None:
            fields["address"] = user.address

        booking = self.repo.create_booking(
            self.db,
            user_id=user.id,
            service_type=data.serviceType,
            service_date=data.serviceDate,
            status=BookingStatus.PENDING,
        )
        booking.remarks = data.remarks
        # Pairs taken from the free text stay as written; structured values overwrite theirs
        self._apply_contact(
            booking, fields, rendered={k: v for k, v in fields.items() if k not in from_remarks}
        )

        self.db.commit()
        logger.info(
            f"📅 Booking {booking.id} created by user {user.id} "
            f"({data.serviceType.value} on {data.serviceDate:%Y-%m-%d})"
        )
        return self._load(booking.id)

    def list_all(self) -> list[Booking]:
        return self.repo.get_bookings(self.db)

    def list_for_user(self, user: User) -> list[Booking]:
        return self.repo.get_user_bookings(self.db, user.id)

    def get_booking(self, booking_id: int, user: User) -> Booking:
        """Visible to the owner, admins and the assigned technician"""
        booking = self._load(booking_id)
        if user.role == Role.ADMIN or booking.user_id == user.id:
            return booking
        technician = booking.technician
        if user.role == Role.TECHNICIAN and technician is not None and technician.user_id == user.id:
            return booking
        raise Unauthorized("You do not have access to this booking")

    def assign_technician(self, booking_id: int, technician_id: int) -> Booking:
        """
        Assign a technician and move the booking to IN_PROGRESS.

        Every call counts as a new job for the technician, including
        repeated assignment of the same technician.
        """
        booking = self._load(booking_id)
        technician = self.db.query(Technician).filter(Technician.id == technician_id).first()
        if not technician:
            raise NotFound("Technician not found")
        if booking.status not in ASSIGNABLE_STATUSES:
            raise InvalidTransition(
                f"Cannot assign a technician to a {booking.status.value} booking"
            )

        booking.technician_id = technician.id
        booking.technician = technician
        booking.status = BookingStatus.IN_PROGRESS
        self.repo.increment_total_jobs(self.db, technician.id)
        self.notifier.notify_booking_assigned(booking, technician)

        self.db.commit()
        logger.info(f"👷 Booking {booking.id} assigned to technician {technician.id} ({technician.name})")
        return self._load(booking.id)

    def set_status(self, booking_id: int, status: BookingStatus) -> Booking:
        booking = self._load(booking_id)
        ensure_transition(booking.status, status)
        if booking.status == status:
            return booking
        if status == BookingStatus.IN_PROGRESS and booking.technician_id is None:
            raise InvalidTransition("Assign a technician to start this booking")

        previous = booking.status
        booking.status = status
        self.notifier.notify_status_changed(booking)

        self.db.commit()
        logger.info(f"🔄 Booking {booking.id} status {previous.value} -> {status.value}")
        return self._load(booking.id)

    def update_details(self, booking_id: int, user: User, data: BookingDetailsUpdate) -> Booking:
        booking = self._load(booking_id)
        if user.role != Role.ADMIN and booking.user_id != user.id:
            raise Unauthorized("You can only edit your own bookings")

        self._apply_contact(booking, data.model_dump(include=set(CONTACT_FIELDS)))
        self.db.commit()
        return self._load(booking.id)

    def add_parts(self, booking_id: int, user: User, parts: list[tuple[int, int]]) -> Booking:
        """Consume stock for parts fitted on a booking, all or nothing"""
        booking = self._load(booking_id)
        if user.role != Role.ADMIN:
            technician = booking.technician
            if technician is None or technician.user_id != user.id:
                raise Unauthorized("Only the assigned technician can add parts")
        if booking.status == BookingStatus.CANCELED:
            raise Conflict("Cannot add parts to a canceled booking")

        try:
            consumed = self.ledger.consume(parts, REASON_USED_IN_BOOKING)
            for part, quantity in consumed:
                self.repo.add_booking_part(self.db, booking.id, part.id, quantity)
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise

        logger.info(f"🔧 Booking {booking.id} used {len(consumed)} part line(s)")
        self.db.expire_all()
        return self._load(booking.id)

    def delete_booking(self, booking_id: int) -> None:
        booking = self._load(booking_id)
        if booking.report is not None:
            raise Conflict(f"Booking {booking.id} has report #{booking.report.id}; delete the report first")

        try:
            items = [(bp.part_id, bp.quantity) for bp in booking.booking_parts]
            if items:
                self.ledger.restore(items, REASON_BOOKING_DELETED)
            self.db.delete(booking)
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise
        logger.info(f"🗑️ Booking {booking_id} deleted, {len(items)} part line(s) restored")
