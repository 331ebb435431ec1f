"""Unit tests for the Order / OrderItem model."""

from datetime import datetime, timezone
from decimal import Decimal

from orderedit.domain.model.order import (
    CatalogStock,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from orderedit.domain.model.value_objects import Money
from tests.fakes import raw_order


class TestOrderFromDict:

    def test_reads_api_payload(self):
        order = Order.from_dict(raw_order())
        assert order.id == 42
        assert order.status == OrderStatus.PENDING
        assert order.total == Decimal("23.5")
        assert order.contact_name == "Leilani"
        assert order.payment_amount == Decimal("23.5")
        assert [i.backend_id for i in order.items] == [1, "2"]
        assert order.created_at == datetime(2026, 10, 18, 1, 0, tzinfo=timezone.utc)

    def test_camel_case_fallbacks(self):
        raw = raw_order(estimatedPickupTime="2026-10-18T03:15:00Z", specialInstructions="Extra napkins")
        del raw["special_instructions"]
        order = Order.from_dict(raw)
        assert order.special_instructions == "Extra napkins"
        assert order.estimated_pickup_time == datetime(2026, 10, 18, 3, 15, tzinfo=timezone.utc)

    def test_advance_notice_must_be_true(self):
        assert not Order.from_dict(raw_order(requires_advance_notice="yes")).requires_advance_notice
        assert Order.from_dict(raw_order(requires_advance_notice=True)).requires_advance_notice

    def test_bad_total_defaults_to_zero(self):
        assert Order.from_dict(raw_order(total="n/a")).total == Decimal("0")


class TestOrderItem:

    def test_edit_ids_are_unique(self):
        a = OrderItem(name="A", quantity=1, price=Decimal("1"))
        b = OrderItem(name="A", quantity=1, price=Decimal("1"))
        assert a.edit_id != b.edit_id

    def test_edit_id_survives_field_edits_and_stock_updates(self):
        item = OrderItem(name="Spam Musubi", quantity=1, price=Decimal("4.50"), backend_id=1)
        edit_id = item.edit_id
        item.quantity = 5
        item.price = Decimal("5.00")
        item.notes = "extra spam"
        enriched = item.with_stock(CatalogStock(stock_tracking_enabled=True, stock_quantity=3))
        assert item.edit_id == edit_id
        assert enriched.edit_id == edit_id
        assert enriched.quantity == 5

    def test_line_total(self):
        item = OrderItem(name="Hafa Tee", quantity=3, price=Decimal("10.00"))
        assert item.line_total == Money.of("30.00")

    def test_unknown_payment_status_defaults_to_needs_payment(self):
        item = OrderItem.from_dict({"id": 1, "name": "X", "price": 1, "quantity": 1, "payment_status": "bogus"})
        assert item.payment_status is PaymentStatus.NEEDS_PAYMENT

    def test_menu_item_id_is_the_catalog_id(self):
        item = OrderItem.from_dict({"id": 901, "menu_item_id": 2, "name": "Hafa Tee", "quantity": 1})
        assert item.backend_id == 2
        assert item.line_id == 901

    def test_row_id_is_the_catalog_id_without_menu_item_id(self):
        item = OrderItem.from_dict({"id": "2", "name": "Hafa Tee", "quantity": 1})
        assert item.backend_id == "2"
        assert item.line_id is None


class TestCatalogStock:

    def test_accepts_either_flag_name(self):
        assert CatalogStock.from_catalog({"enable_stock_tracking": True}).stock_tracking_enabled
        assert CatalogStock.from_catalog({"stock_tracking_enabled": "true"}).stock_tracking_enabled
        assert not CatalogStock.from_catalog({}).stock_tracking_enabled

    def test_reads_quantities(self):
        stock = CatalogStock.from_catalog(
            {"enable_stock_tracking": True, "stock_quantity": "20", "damaged_quantity": 1, "low_stock_threshold": None}
        )
        assert stock.stock_quantity == 20
        assert stock.damaged_quantity == 1
        assert stock.low_stock_threshold is None
