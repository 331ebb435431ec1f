"""Unit tests for the InventoryReversionDecisionEngine domain service."""

from decimal import Decimal

import pytest

from orderedit.domain.exceptions import ValidationError
from orderedit.domain.model.inventory import (
    DamagedItemQueue,
    DamagedItemRecord,
    Disposition,
    PendingRemoval,
    RemovalDecision,
)
from orderedit.domain.model.order import CatalogStock, OrderItem
from orderedit.domain.service.inventory_reversion import InventoryReversionDecisionEngine
from orderedit.domain.service.item_identity_tracker import ItemIdentityTracker

TRACKED = CatalogStock(stock_tracking_enabled=True, stock_quantity=10)


def _item(backend_id=2, qty=2, stock=TRACKED) -> OrderItem:
    return OrderItem(name="Hafa Tee", quantity=qty, price=Decimal("10"), backend_id=backend_id, stock=stock)


def _engine(*originals: OrderItem) -> tuple[InventoryReversionDecisionEngine, ItemIdentityTracker]:
    tracker = ItemIdentityTracker(list(originals))
    return InventoryReversionDecisionEngine(tracker), tracker


class TestDecide:

    def test_untracked_item_is_removed_silently(self):
        item = _item(stock=CatalogStock())
        engine, _ = _engine(item)
        assert engine.decide(item) is RemovalDecision.REMOVE

    def test_newly_added_tracked_item_is_removed_silently(self):
        engine, tracker = _engine(_item())
        added = _item()
        tracker.tag_new(added.edit_id)
        assert engine.decide(added) is RemovalDecision.REMOVE

    def test_tracked_original_item_needs_disposition(self):
        item = _item()
        engine, _ = _engine(item)
        assert engine.decide(item) is RemovalDecision.PROMPT_DISPOSITION


class TestResolve:

    def test_return_to_inventory_queues_nothing(self):
        item = _item()
        engine, _ = _engine(item)
        assert engine.resolve(PendingRemoval(item), Disposition.RETURN_TO_INVENTORY) is None

    def test_mark_as_damaged_builds_record(self):
        item = _item(qty=3)
        engine, _ = _engine(item)
        record = engine.resolve(PendingRemoval(item), Disposition.MARK_AS_DAMAGED, "  dropped  ")
        assert record == DamagedItemRecord(backend_id=2, quantity=3, reason="dropped")

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_mark_as_damaged_requires_reason(self, reason):
        item = _item()
        engine, _ = _engine(item)
        with pytest.raises(ValidationError, match="reason is required"):
            engine.resolve(PendingRemoval(item), Disposition.MARK_AS_DAMAGED, reason)


    def test_zero_quantity_line_has_nothing_to_report(self):
        item = _item(qty=0)
        engine, _ = _engine(item)
        assert engine.resolve(PendingRemoval(item), Disposition.MARK_AS_DAMAGED, "dropped") is None

    @pytest.mark.parametrize("qty", [0, -1])
    def test_record_quantity_must_be_positive(self, qty):
        with pytest.raises(ValidationError, match="must be positive"):
            DamagedItemRecord(2, qty, "dropped")

class TestDamagedItemQueue:

    def test_drain_returns_records_and_empties_queue(self):
        queue = DamagedItemQueue()
        queue.append(DamagedItemRecord(1, 1, "spilled"))
        queue.append(DamagedItemRecord(2, 2, "dropped"))

        drained = queue.drain()

        assert [r.backend_id for r in drained] == [1, 2]
        assert len(queue) == 0
        assert queue.drain() == []
