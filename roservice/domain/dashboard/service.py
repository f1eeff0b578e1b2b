"""Dashboard service - Admin summary counts, due services and customer history"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...config import DUE_SERVICE_DAYS, LOW_STOCK_THRESHOLD
from ...models import Booking, BookingStatus, Part, User
from ..bookings.repository import BookingRepository
from ..stock.repository import StockRepository


class DashboardService:
    def __init__(
        self,
        db: Session,
        due_service_days: int = DUE_SERVICE_DAYS,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD,
    ):
        self.db = db
        self.due_service_days = due_service_days
        self.low_stock_threshold = low_stock_threshold

    def _due_cutoff(self, now: datetime) -> datetime:
        return now - timedelta(days=self.due_service_days)

    def summary(self, now: Optional[datetime] = None) -> dict:
        """
        Counts for the admin dashboard

        "Today" is the calendar day of ``now``, so bookings at any time of
        the day are counted.
        """
        now = now or datetime.utcnow()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

        return {
            "totalServicesToday": BookingRepository.count_scheduled_between(
                self.db, start_of_day, start_of_day + timedelta(days=1)
            ),
            "pendingServices": BookingRepository.count_by_status(self.db, BookingStatus.PENDING),
            "dueServices": (
                self.db.query(Booking)
                .filter(
                    Booking.status == BookingStatus.COMPLETED,
                    Booking.service_date <= self._due_cutoff(now),
                )
                .count()
            ),
            "lowStockAlert": self.low_stock_parts(),
        }

    def low_stock_parts(self) -> list[Part]:
        return StockRepository.get_low_stock_parts(self.db, self.low_stock_threshold)

    def due_services(self, now: Optional[datetime] = None) -> list[Booking]:
        """Completed bookings serviced at least ``due_service_days`` ago, newest first"""
        now = now or datetime.utcnow()
        return BookingRepository.get_completed_before(self.db, self._due_cutoff(now))

    def customer_history(self, query: Optional[str] = None) -> list[tuple[User, list[Booking]]]:
        """Users matching ``query`` (name, case-insensitive, or phone) with their bookings"""
        users_query = self.db.query(User)
        if query:
            users_query = users_query.filter(
                or_(User.name.ilike(f"%{query}%"), User.phone.contains(query))
            )

        history = []
        for user in users_query.order_by(User.name).all():
            bookings = sorted(
                BookingRepository.get_user_bookings(self.db, user.id),
                key=lambda b: b.service_date,
                reverse=True,
            )
            history.append((user, bookings))
        return history
