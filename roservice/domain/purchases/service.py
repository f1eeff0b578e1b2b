"""Purchase service - Records vendor purchases and restocks parts"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import NotFound, ServiceError
from ...models import PurchaseEntry
from ..stock.ledger import REASON_PURCHASED, StockLedger
from ..stock.repository import StockRepository
from .schemas import PurchaseCreate

logger = logging.getLogger(__name__)


class PurchaseService:
    def __init__(self, db: Session):
        self.db = db
        self.ledger = StockLedger(db)

    def record_purchase(self, data: PurchaseCreate) -> PurchaseEntry:
        """Create the purchase entry and add its quantity to stock in one transaction"""
        part = StockRepository.get_part(self.db, data.partId)
        if not part:
            raise NotFound("Part not found")

        try:
            entry = PurchaseEntry(
                vendor_name=data.vendorName,
                bill_number=data.billNumber,
                purchase_date=data.purchaseDate,
                part_id=data.partId,
                quantity=data.quantity,
                cost_per_unit=data.costPerUnit,
                notes=data.notes,
            )
            self.db.add(entry)
            self.ledger.adjust(part.id, data.quantity, REASON_PURCHASED)
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise

        self.db.refresh(entry)
        logger.info(
            f"🛒 Purchase recorded: bill {entry.bill_number} from {entry.vendor_name}, "
            f"{entry.quantity} x {part.name}"
        )
        return entry

    def list_purchases(self, part_id: Optional[int] = None) -> list[PurchaseEntry]:
        query = self.db.query(PurchaseEntry)
        if part_id is not None:
            query = query.filter(PurchaseEntry.part_id == part_id)
        return query.order_by(PurchaseEntry.purchase_date.desc(), PurchaseEntry.id.desc()).all()
