"""Unit tests for the EnrichItems use case."""

import asyncio

from orderedit.application.enrich_items import EnrichItemsHandler
from orderedit.domain.model.order import Order
from tests.fakes import FakeMenuItemRepository, menu_items, raw_order


def _order_with_duplicates() -> Order:
    raw = raw_order()
    raw["items"].append({"id": 2, "name": "Hafa Tee", "price": 10.0, "quantity": 2, "notes": "size M"})
    raw["items"].append({"id": None, "name": "Custom plate", "price": 12.0, "quantity": 1})
    return Order.from_dict(raw)


class TestHandle:

    def test_one_lookup_per_distinct_backend_id(self):
        repo = FakeMenuItemRepository(menu_items())
        order = _order_with_duplicates()

        stock = asyncio.run(EnrichItemsHandler(repo).handle(order.items))

        assert sorted(str(i) for i in repo.lookups) == ["1", "2"]
        assert stock["2"].stock_tracking_enabled
        assert not stock["1"].stock_tracking_enabled

    def test_failed_lookup_only_affects_that_item(self):
        repo = FakeMenuItemRepository(menu_items(), failing_lookups=(1,))
        order = _order_with_duplicates()

        stock = asyncio.run(EnrichItemsHandler(repo).handle(order.items))

        assert "1" not in stock
        assert stock["2"].stock_quantity == 20


class TestMerge:

    def test_merges_by_backend_id_and_keeps_user_edits(self):
        repo = FakeMenuItemRepository(menu_items())
        order = _order_with_duplicates()
        items = list(order.items)
        items[1].quantity = 5
        items[1].notes = "changed while loading"

        stock = asyncio.run(EnrichItemsHandler(repo).handle(items))
        merged = EnrichItemsHandler.merge(items, stock)

        assert [m.edit_id for m in merged] == [i.edit_id for i in items]
        tee = merged[1]
        assert tee.stock_tracking_enabled
        assert tee.quantity == 5
        assert tee.notes == "changed while loading"
        assert merged[2].stock_tracking_enabled  # second Hafa Tee row, int id
        assert not merged[3].stock_tracking_enabled  # free-form line untouched
