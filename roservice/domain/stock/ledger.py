"""
Stock ledger

Every change to a part's quantity goes through StockLedger.adjust, which
applies a guarded UPDATE and appends exactly one StockLog row. The ledger
never commits: callers group several adjustments into one transaction and
roll back on failure.
"""

import logging
from collections import OrderedDict
from typing import Iterable

from sqlalchemy.orm import Session

from ...errors import InsufficientStock, NotFound, ValidationFailed
from ...models import Part
from .repository import StockRepository

logger = logging.getLogger(__name__)

REASON_USED_IN_SERVICE = "Used in service"
REASON_USED_IN_BOOKING = "Used in booking"
REASON_PURCHASED = "Purchased"


def aggregate_quantities(requests: Iterable[tuple[int, int]]) -> "OrderedDict[int, int]":
    """Sum quantities per part id, keeping first-seen order"""
    totals: "OrderedDict[int, int]" = OrderedDict()
    for part_id, quantity in requests:
        if quantity <= 0:
            raise ValidationFailed(f"Quantity for part {part_id} must be positive")
        totals[part_id] = totals.get(part_id, 0) + quantity
    return totals


class StockLedger:
    def __init__(self, db: Session):
        self.db = db
        self.repo = StockRepository()

    def adjust(self, part_id: int, delta: int, reason: str) -> int:
        """
        Apply a signed quantity change and log it.

        Raises:
            ValidationFailed: delta is zero or reason is empty
            NotFound: part does not exist
            InsufficientStock: the change would make the quantity negative

        Returns:
            The updated quantity
        """
        if delta == 0:
            raise ValidationFailed("Quantity change must not be zero")
        if not reason or not reason.strip():
            raise ValidationFailed("A reason is required for every stock change")

        updated = self.repo.apply_delta(self.db, part_id, delta)
        if not updated:
            part = self.repo.get_part(self.db, part_id)
            if part is None:
                raise NotFound(f"Part {part_id} not found")
            logger.warning(
                f"⚠️ Stock guard rejected change {delta:+d} for part {part_id} ({part.name}), on hand {part.quantity}"
            )
            raise InsufficientStock(
                part_id,
                f"Insufficient stock for part: {part.name} (available {part.quantity}, requested {-delta})",
            )

        self.repo.add_log(self.db, part_id, delta, reason.strip())
        quantity = self.repo.get_quantity(self.db, part_id)
        logger.info(f"📦 Part {part_id} {delta:+d} ({reason}) -> {quantity}")
        return quantity

    def check_available(self, requests: Iterable[tuple[int, int]]) -> "OrderedDict[int, Part]":
        """
        Validate a whole parts list before anything is mutated.

        Duplicate part ids are summed. A missing part or a part with too
        little stock raises InsufficientStock naming that part.

        Returns:
            Parts keyed by id, in request order
        """
        totals = aggregate_quantities(requests)
        parts: "OrderedDict[int, Part]" = OrderedDict()
        for part_id, quantity in totals.items():
            part = self.repo.get_part(self.db, part_id)
            if part is None:
                raise InsufficientStock(part_id, f"Insufficient stock for part: {part_id} (part not found)")
            if part.quantity < quantity:
                raise InsufficientStock(
                    part_id,
                    f"Insufficient stock for part: {part.name} (available {part.quantity}, requested {quantity})",
                )
            parts[part_id] = part
        return parts

    def consume(self, requests: Iterable[tuple[int, int]], reason: str) -> list[tuple[Part, int]]:
        """
        Check every request, then deduct each one.

        Returns:
            (part, quantity) pairs that were deducted, duplicates merged
        """
        totals = aggregate_quantities(list(requests))
        parts = self.check_available(totals.items())

        consumed = []
        for part_id, quantity in totals.items():
            self.adjust(part_id, -quantity, reason)
            consumed.append((parts[part_id], quantity))
        return consumed

    def restore(self, items: Iterable[tuple[int, int]], reason: str) -> None:
        """Put quantities back (reversal of an earlier consume)"""
        for part_id, quantity in aggregate_quantities(items).items():
            self.adjust(part_id, quantity, reason)

    def replay_quantity(self, part_id: int) -> int:
        """Initial quantity plus every logged change"""
        part = self.repo.get_part(self.db, part_id)
        if part is None:
            raise NotFound(f"Part {part_id} not found")
        return part.initial_quantity + self.repo.sum_changes(self.db, part_id)

    def verify(self, part_id: int) -> bool:
        """True when the log replays to the current quantity"""
        return self.replay_quantity(part_id) == self.repo.get_quantity(self.db, part_id)
