"""Stock repository - Database operations for parts and stock logs"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ...models import Part, StockLog


class StockRepository:
    """Repository for part and stock log database operations"""

    @staticmethod
    def get_part(db: Session, part_id: int) -> Optional[Part]:
        return db.query(Part).filter(Part.id == part_id).first()

    @staticmethod
    def get_part_by_name(db: Session, name: str) -> Optional[Part]:
        return db.query(Part).filter(func.lower(Part.name) == name.strip().lower()).first()

    @staticmethod
    def get_parts(db: Session, include_logs: bool = False) -> list[Part]:
        query = db.query(Part)
        if include_logs:
            query = query.options(selectinload(Part.stock_logs))
        return query.order_by(Part.name.asc()).all()

    @staticmethod
    def get_low_stock_parts(db: Session, threshold: int) -> list[Part]:
        return db.query(Part).filter(Part.quantity <= threshold).order_by(Part.quantity.asc()).all()

    @staticmethod
    def get_quantity(db: Session, part_id: int) -> Optional[int]:
        return db.query(Part.quantity).filter(Part.id == part_id).scalar()

    @staticmethod
    def create_part(db: Session, **part_data) -> Part:
        part = Part(**part_data)
        db.add(part)
        db.flush()
        return part

    @staticmethod
    def apply_delta(db: Session, part_id: int, delta: int) -> int:
        """
        Conditionally add ``delta`` to a part's quantity in a single UPDATE.

        The WHERE clause carries the non-negativity guard, so two requests
        racing for the same stock cannot both succeed. Returns the number of
        rows updated (0 when the part is missing or stock is insufficient).
        """
        return (
            db.query(Part)
            .filter(Part.id == part_id, Part.quantity + delta >= 0)
            .update({Part.quantity: Part.quantity + delta}, synchronize_session="fetch")
        )

    @staticmethod
    def add_log(db: Session, part_id: int, change: int, reason: str) -> StockLog:
        log = StockLog(part_id=part_id, change=change, reason=reason)
        db.add(log)
        db.flush()
        return log

    @staticmethod
    def get_logs(db: Session, part_id: int) -> list[StockLog]:
        return db.query(StockLog).filter(StockLog.part_id == part_id).order_by(StockLog.id.asc()).all()

    @staticmethod
    def sum_changes(db: Session, part_id: int) -> int:
        return (
            db.query(func.coalesce(func.sum(StockLog.change), 0))
            .filter(StockLog.part_id == part_id)
            .scalar()
        )
