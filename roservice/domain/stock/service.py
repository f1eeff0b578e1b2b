"""Stock service - Part management and manual stock adjustments"""

import logging

from sqlalchemy.orm import Session

from ...errors import Conflict, NotFound, ServiceError
from ...models import Part, StockLog
from .ledger import StockLedger
from .repository import StockRepository
from .schemas import PartCreate, PartUpdate

logger = logging.getLogger(__name__)


class StockService:
    """Service layer for spare-parts inventory"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = StockRepository()
        self.ledger = StockLedger(db)

    def list_parts(self, include_logs: bool = True) -> list[Part]:
        return self.repo.get_parts(self.db, include_logs=include_logs)

    def get_part(self, part_id: int) -> Part:
        part = self.repo.get_part(self.db, part_id)
        if not part:
            raise NotFound("Part not found")
        return part

    def create_part(self, data: PartCreate) -> Part:
        if self.repo.get_part_by_name(self.db, data.name):
            raise Conflict(f"A part named '{data.name}' already exists")

        part = self.repo.create_part(
            self.db,
            name=data.name,
            description=data.description,
            unit_cost=data.unitCost,
            quantity=data.quantity,
            initial_quantity=data.quantity,
        )
        self.db.commit()
        self.db.refresh(part)
        logger.info(f"🆕 Part created: {part.name} (qty {part.quantity}, unit cost {part.unit_cost})")
        return part

    def update_part(self, part_id: int, data: PartUpdate) -> Part:
        part = self.get_part(part_id)

        if data.name is not None:
            existing = self.repo.get_part_by_name(self.db, data.name)
            if existing and existing.id != part.id:
                raise Conflict(f"A part named '{data.name}' already exists")
            part.name = data.name
        if data.description is not None:
            part.description = data.description
        if data.unitCost is not None:
            part.unit_cost = data.unitCost

        self.db.commit()
        self.db.refresh(part)
        return part

    def adjust_stock(self, part_id: int, quantity: int, reason: str) -> int:
        """Manual signed adjustment (restock, write-off, correction)"""
        try:
            new_quantity = self.ledger.adjust(part_id, quantity, reason)
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise
        return new_quantity

    def get_logs(self, part_id: int) -> list[StockLog]:
        self.get_part(part_id)
        return self.repo.get_logs(self.db, part_id)
