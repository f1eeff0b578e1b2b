"""Report repository - Database operations for service reports"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import Report, ReportPart


def _with_relations(query):
    return query.options(
        joinedload(Report.technician),
        selectinload(Report.parts).joinedload(ReportPart.part),
    )


class ReportRepository:
    """Repository for report database operations"""

    @staticmethod
    def get_report(db: Session, report_id: int) -> Optional[Report]:
        return _with_relations(db.query(Report)).filter(Report.id == report_id).first()

    @staticmethod
    def get_report_by_booking(db: Session, booking_id: int) -> Optional[Report]:
        return _with_relations(db.query(Report)).filter(Report.booking_id == booking_id).first()

    @staticmethod
    def get_reports(db: Session) -> list[Report]:
        return _with_relations(db.query(Report)).order_by(Report.created_at.desc(), Report.id.desc()).all()

    @staticmethod
    def get_technician_reports(db: Session, technician_id: int) -> list[Report]:
        return (
            _with_relations(db.query(Report))
            .filter(Report.technician_id == technician_id)
            .order_by(Report.created_at.desc(), Report.id.desc())
            .all()
        )
