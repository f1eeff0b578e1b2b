import pytest

from conftest import make_part
from roservice.domain.purchases.schemas import PurchaseCreate
from roservice.domain.purchases.service import PurchaseService
from roservice.domain.stock.ledger import REASON_PURCHASED, StockLedger, aggregate_quantities
from roservice.domain.stock.service import StockService
from roservice.errors import InsufficientStock, NotFound, ValidationFailed
from roservice.models import StockLog


def logs_for(db, part_id):
    return db.query(StockLog).filter(StockLog.part_id == part_id).order_by(StockLog.id).all()


def test_adjust_applies_delta_and_logs_once(db):
    part = make_part(db, "Sediment Filter", 10, 5.0)
    ledger = StockLedger(db)

    assert ledger.adjust(part.id, -3, "Used in service") == 7
    db.commit()

    logs = logs_for(db, part.id)
    assert [(log.change, log.reason) for log in logs] == [(-3, "Used in service")]
    assert ledger.verify(part.id)


def test_adjust_rejects_going_negative_without_side_effects(db):
    part = make_part(db, "Membrane", 2, 40.0)
    ledger = StockLedger(db)

    with pytest.raises(InsufficientStock) as exc_info:
        ledger.adjust(part.id, -3, "Used in service")

    assert exc_info.value.part_id == part.id
    db.rollback()
    db.refresh(part)
    assert part.quantity == 2
    assert logs_for(db, part.id) == []


def test_adjust_can_empty_stock_exactly(db):
    part = make_part(db, "Tap", 2, 3.0)
    assert StockLedger(db).adjust(part.id, -2, "Used in booking") == 0


def test_adjust_validation(db):
    part = make_part(db, "Valve", 5, 1.0)
    ledger = StockLedger(db)

    with pytest.raises(ValidationFailed):
        ledger.adjust(part.id, 0, "Nothing")
    with pytest.raises(ValidationFailed):
        ledger.adjust(part.id, 1, "   ")
    with pytest.raises(NotFound):
        ledger.adjust(9999, 1, "Purchased")


def test_aggregate_quantities_merges_duplicates_in_order():
    assert list(aggregate_quantities([(2, 1), (1, 4), (2, 2)]).items()) == [(2, 3), (1, 4)]
    with pytest.raises(ValidationFailed):
        aggregate_quantities([(1, 0)])


def test_consume_is_all_or_nothing(db):
    filter_part = make_part(db, "Carbon Filter", 10, 5.0)
    membrane = make_part(db, "RO Membrane", 1, 40.0)
    ledger = StockLedger(db)

    with pytest.raises(InsufficientStock) as exc_info:
        ledger.consume([(filter_part.id, 3), (membrane.id, 2)], "Used in service")

    assert exc_info.value.part_id == membrane.id
    db.rollback()
    db.refresh(filter_part)
    assert filter_part.quantity == 10
    assert logs_for(db, filter_part.id) == []


def test_consume_checks_duplicates_against_total(db):
    part = make_part(db, "Pre Filter", 4, 2.0)
    ledger = StockLedger(db)

    with pytest.raises(InsufficientStock):
        ledger.consume([(part.id, 3), (part.id, 2)], "Used in service")

    consumed = ledger.consume([(part.id, 2), (part.id, 2)], "Used in service")
    assert [(p.id, q) for p, q in consumed] == [(part.id, 4)]
    assert len(logs_for(db, part.id)) == 1


def test_consume_unknown_part_names_it(db):
    with pytest.raises(InsufficientStock) as exc_info:
        StockLedger(db).consume([(4242, 1)], "Used in service")
    assert exc_info.value.part_id == 4242


def test_restore_and_replay(db):
    part = make_part(db, "UV Lamp", 6, 25.0)
    ledger = StockLedger(db)

    ledger.consume([(part.id, 4)], "Used in service")
    ledger.restore([(part.id, 4)], "Reversed: report #1 deleted")
    ledger.adjust(part.id, 5, REASON_PURCHASED)
    db.commit()

    assert ledger.replay_quantity(part.id) == 11
    assert ledger.verify(part.id)
    assert [log.change for log in logs_for(db, part.id)] == [-4, 4, 5]


def test_stock_service_manual_adjustment_rolls_back_on_failure(db):
    part = make_part(db, "Booster Pump", 1, 90.0)
    service = StockService(db)

    with pytest.raises(InsufficientStock):
        service.adjust_stock(part.id, -2, "Write-off")

    assert service.adjust_stock(part.id, 4, "Restock from store") == 5
    assert [log.reason for log in service.get_logs(part.id)] == ["Restock from store"]


def test_purchase_adds_stock_with_purchased_log(db):
    part = make_part(db, "Float Valve", 3, 4.0)

    entry = PurchaseService(db).record_purchase(
        PurchaseCreate(
            vendorName="Aqua Traders",
            billNumber="B-101",
            purchaseDate="2025-02-01T00:00:00",
            partId=part.id,
            quantity=7,
            costPerUnit=3.5,
        )
    )

    db.refresh(part)
    assert entry.id is not None
    assert part.quantity == 10
    assert [(log.change, log.reason) for log in logs_for(db, part.id)] == [(7, "Purchased")]


def test_purchase_for_missing_part_fails(db):
    with pytest.raises(NotFound):
        PurchaseService(db).record_purchase(
            PurchaseCreate(
                vendorName="Aqua Traders",
                billNumber="B-102",
                purchaseDate="2025-02-01T00:00:00",
                partId=777,
                quantity=1,
                costPerUnit=1.0,
            )
        )
