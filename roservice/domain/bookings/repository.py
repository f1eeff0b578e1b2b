"""Booking repository - Database operations for bookings"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Booking, BookingPart, BookingStatus, Technician


def _with_relations(query):
    return query.options(
        joinedload(Booking.user),
        joinedload(Booking.technician),
        joinedload(Booking.report),
        selectinload(Booking.booking_parts).joinedload(BookingPart.part),
    )


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
        return _with_relations(db.query(Booking)).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_bookings(db: Session) -> list[Booking]:
        return _with_relations(db.query(Booking)).order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    @staticmethod
    def get_user_bookings(db: Session, user_id: int) -> list[Booking]:
        return (
            _with_relations(db.query(Booking))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    @staticmethod
    def get_technician_bookings(db: Session, technician_id: int) -> list[Booking]:
        return (
            _with_relations(db.query(Booking))
            .filter(Booking.technician_id == technician_id)
            .order_by(Booking.service_date.asc())
            .all()
        )

    @staticmethod
    def create_booking(db: Session, **booking_data) -> Booking:
        booking = Booking(**booking_data)
        db.add(booking)
        db.flush()
        return booking

    @staticmethod
    def add_booking_part(db: Session, booking_id: int, part_id: int, quantity: int) -> BookingPart:
        booking_part = BookingPart(booking_id=booking_id, part_id=part_id, quantity=quantity)
        db.add(booking_part)
        return booking_part

    @staticmethod
    def increment_total_jobs(db: Session, technician_id: int) -> int:
        """Atomic +1 on the technician's lifetime job counter"""
        return (
            db.query(Technician)
            .filter(Technician.id == technician_id)
            .update({Technician.total_jobs: Technician.total_jobs + 1}, synchronize_session="fetch")
        )

    @staticmethod
    def count_by_status(db: Session, status: BookingStatus) -> int:
        return db.query(Booking).filter(Booking.status == status).count()

    @staticmethod
    def count_scheduled_between(db: Session, start: datetime, end: datetime) -> int:
        return (
            db.query(Booking)
            .filter(Booking.service_date >= start, Booking.service_date < end)
            .count()
        )

    @staticmethod
    def get_completed_before(db: Session, cutoff: datetime, only_unreminded: bool = False) -> list[Booking]:
        query = _with_relations(db.query(Booking)).filter(
            Booking.status == BookingStatus.COMPLETED,
            Booking.service_date <= cutoff,
        )
        if only_unreminded:
            query = query.filter(Booking.reminder_sent_at.is_(None))
        return query.order_by(Booking.service_date.desc()).all()
