"""Technician repository - Database operations for technicians"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, BookingStatus, Report, Technician


class TechnicianRepository:
    """Repository for technician database operations"""

    @staticmethod
    def get_technician(db: Session, technician_id: int) -> Optional[Technician]:
        return db.query(Technician).filter(Technician.id == technician_id).first()

    @staticmethod
    def get_by_user_id(db: Session, user_id: int) -> Optional[Technician]:
        return db.query(Technician).filter(Technician.user_id == user_id).first()

    @staticmethod
    def get_technicians(db: Session) -> list[Technician]:
        return db.query(Technician).order_by(Technician.name).all()

    @staticmethod
    def create_technician(db: Session, **data) -> Technician:
        technician = Technician(**data)
        db.add(technician)
        db.flush()
        return technician

    @staticmethod
    def count_reports(db: Session, technician_id: int) -> int:
        return db.query(Report).filter(Report.technician_id == technician_id).count()

    @staticmethod
    def unlink_bookings(db: Session, technician_id: int) -> int:
        return (
            db.query(Booking)
            .filter(Booking.technician_id == technician_id)
            .update({Booking.technician_id: None}, synchronize_session="fetch")
        )

    @staticmethod
    def count_bookings(db: Session, technician_id: int, status: Optional[BookingStatus] = None) -> int:
        query = db.query(Booking).filter(Booking.technician_id == technician_id)
        if status is not None:
            query = query.filter(Booking.status == status)
        return query.count()
