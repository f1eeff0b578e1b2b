"""
Report service - Service reports and their stock reconciliation

Submitting a report deducts every part it lists; editing a report puts the
old parts back before deducting the new list; deleting one puts its parts
back. Each of these runs in a single transaction so a rejected parts list
leaves stock exactly as it was.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import Conflict, NotFound, ServiceError, Unauthorized
from ...models import Booking, Report, ReportPart, Role, Technician, User
from ...shared.remarks import encode_remarks, format_parts_summary, parse_parts_summary
from ..stock.ledger import REASON_USED_IN_SERVICE, StockLedger
from ..stock.repository import StockRepository
from .repository import ReportRepository
from .schemas import ReportCreate, ReportUpdate

logger = logging.getLogger(__name__)


def reversal_reason(report_id: int, action: str) -> str:
    return f"Reversed: report #{report_id} {action}"


class ReportService:
    """Service layer for service reports"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReportRepository()
        self.ledger = StockLedger(db)

    def _load(self, report_id: int) -> Report:
        report = self.repo.get_report(self.db, report_id)
        if not report:
            raise NotFound("Report not found")
        return report

    def _technician_for(self, user: User) -> Optional[Technician]:
        return self.db.query(Technician).filter(Technician.user_id == user.id).first()

    def _check_access(self, report: Report, user: User) -> None:
        if user.role == Role.ADMIN:
            return
        technician = self._technician_for(user)
        if technician is None or technician.id != report.technician_id:
            raise Unauthorized("Access denied")

    def _check_booking(self, booking_id: int, technician_id: int, report_id: Optional[int] = None) -> None:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise NotFound("Booking not found")
        if booking.technician_id != technician_id:
            raise Unauthorized("This booking is not assigned to you")
        existing = self.repo.get_report_by_booking(self.db, booking_id)
        if existing and existing.id != report_id:
            raise Conflict(f"Booking {booking_id} already has report #{existing.id}")

    def _apply(self, report: Report, data: ReportCreate) -> None:
        """Deduct the parts list and write every derived field onto the report"""
        consumed = self.ledger.consume(
            [(item.partId, item.quantity) for item in data.partsUsed], REASON_USED_IN_SERVICE
        )

        report.booking_id = data.bookingId
        report.customer_name = data.customerName
        report.mobile_number = data.mobileNumber
        report.address = data.address
        report.service_date_time = data.dateTime
        report.service_type = data.serviceType
        report.amount_received = data.amountReceived
        report.summary = format_parts_summary((part.name, quantity) for part, quantity in consumed)
        report.total_money = sum(part.unit_cost * quantity for part, quantity in consumed)
        report.remarks = encode_remarks(
            {
                "Customer": data.customerName,
                "Phone": data.mobileNumber,
                "Address": data.address,
                "DateTime": data.dateTime.isoformat(),
                "Service": data.serviceType,
            },
            existing=data.remarks,
        )
        report.parts = [
            ReportPart(part_id=part.id, quantity=quantity, unit_cost=part.unit_cost)
            for part, quantity in consumed
        ]

    def stored_parts(self, report: Report) -> list[tuple[int, int]]:
        """
        Parts a report deducted, as (part_id, quantity).

        Reports without structured rows are resolved from their summary
        text by part name.
        """
        if report.parts:
            return [(rp.part_id, rp.quantity) for rp in report.parts]

        items = []
        for name, quantity in parse_parts_summary(report.summary):
            part = StockRepository.get_part_by_name(self.db, name)
            if part is None:
                logger.warning(f"⚠️ Report {report.id}: part '{name}' from summary no longer exists")
                continue
            items.append((part.id, quantity))
        return items

    def _reverse(self, report: Report, action: str) -> None:
        items = self.stored_parts(report)
        if items:
            self.ledger.restore(items, reversal_reason(report.id, action))

    def create_report(self, technician: Technician, data: ReportCreate) -> Report:
        if data.bookingId is not None:
            self._check_booking(data.bookingId, technician.id)

        try:
            report = Report(technician_id=technician.id)
            self._apply(report, data)
            self.db.add(report)
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise

        logger.info(
            f"📝 Report {report.id} submitted by technician {technician.id}: "
            f"'{report.summary}' total {report.total_money:.2f}"
        )
        return self._load(report.id)

    def update_report(self, report_id: int, user: User, data: ReportUpdate) -> Report:
        """Replace a report; its old parts are restored before the new list is deducted"""
        report = self._load(report_id)
        self._check_access(report, user)
        if data.bookingId is not None:
            self._check_booking(data.bookingId, report.technician_id, report.id)

        try:
            self._reverse(report, "edited")
            self._apply(report, data)
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise

        logger.info(f"✏️ Report {report.id} updated: '{report.summary}' total {report.total_money:.2f}")
        self.db.expire_all()
        return self._load(report.id)

    def delete_report(self, report_id: int) -> None:
        report = self._load(report_id)
        try:
            self._reverse(report, "deleted")
            self.db.delete(report)
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise
        logger.info(f"🗑️ Report {report_id} deleted and its parts restored")

    def list_reports(self, user: User) -> list[Report]:
        """Admins see every report, technicians their own"""
        if user.role == Role.ADMIN:
            return self.repo.get_reports(self.db)
        technician = self._technician_for(user)
        if technician is None:
            raise Unauthorized("Access denied")
        return self.repo.get_technician_reports(self.db, technician.id)

    def get_report(self, report_id: int, user: User) -> Report:
        report = self._load(report_id)
        self._check_access(report, user)
        return report

    def get_report_by_booking(self, booking_id: int, user: User) -> Report:
        report = self.repo.get_report_by_booking(self.db, booking_id)
        if not report:
            raise NotFound("Report not found for this booking")
        self._check_access(report, user)
        return report
