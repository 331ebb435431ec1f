"""Order aggregate as seen by the admin edit surface.

The backend owns the authoritative order; this model is the local copy an
administrator edits.  ``Order.from_dict`` reconstitutes it from the order
API payload without re-validating business rules.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from orderedit.domain.model.value_objects import (
    Money,
    parse_amount,
    parse_quantity,
)


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(Enum):
    NEEDS_PAYMENT = "needs_payment"
    ALREADY_PAID = "already_paid"


def new_edit_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class CatalogStock:
    """Stock-tracking flags copied from a catalog (menu item) record.

    A mirror only: the server holds the authoritative numbers.
    """

    stock_tracking_enabled: bool = False
    stock_quantity: int | None = None
    damaged_quantity: int | None = None
    low_stock_threshold: int | None = None

    @staticmethod
    def from_catalog(raw: dict[str, Any]) -> CatalogStock:
        enabled = raw.get("stock_tracking_enabled", raw.get("enable_stock_tracking", False))
        return CatalogStock(
            stock_tracking_enabled=enabled is True or enabled == "true",
            stock_quantity=_optional_int(raw.get("stock_quantity")),
            damaged_quantity=_optional_int(raw.get("damaged_quantity")),
            low_stock_threshold=_optional_int(raw.get("low_stock_threshold")),
        )


@dataclass
class OrderItem:
    """One line on the edit surface.

    ``edit_id`` is generated once per item instance and never recomputed;
    ``backend_id`` is the catalog id, absent for free-form lines.  When the
    order API reports a separate ``menu_item_id``, the row's own id is kept
    in ``line_id`` and sent back unchanged.
    """

    name: str
    quantity: int
    price: Decimal
    backend_id: str | int | None = None
    notes: str = ""
    customizations: dict[str, Any] | None = None
    payment_status: PaymentStatus = PaymentStatus.NEEDS_PAYMENT
    stock: CatalogStock = field(default_factory=CatalogStock)
    line_id: str | int | None = None
    edit_id: str = field(default_factory=new_edit_id)

    @property
    def line_total(self) -> Money:
        return Money(self.price) * self.quantity

    @property
    def stock_tracking_enabled(self) -> bool:
        return self.stock.stock_tracking_enabled

    def with_stock(self, stock: CatalogStock) -> OrderItem:
        """Copy with new stock mirror fields; identity and edits preserved."""
        return replace(self, stock=stock)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> OrderItem:
        status = raw.get("payment_status")
        menu_item_id = raw.get("menu_item_id")
        return OrderItem(
            name=raw.get("name") or "",
            quantity=parse_quantity(raw.get("quantity")),
            price=parse_amount(raw.get("price")),
            backend_id=raw.get("id") if menu_item_id is None else menu_item_id,
            line_id=None if menu_item_id is None else raw.get("id"),
            notes=raw.get("notes") or "",
            customizations=raw.get("customizations"),
            payment_status=(
                PaymentStatus.ALREADY_PAID
                if status == PaymentStatus.ALREADY_PAID.value
                else PaymentStatus.NEEDS_PAYMENT
            ),
            stock=CatalogStock.from_catalog(raw),
        )


@dataclass(frozen=True)
class SnapshotItem:
    """Immutable copy of an item as it stood when editing began."""

    backend_id: str | int | None
    name: str
    quantity: int
    price: Decimal
    notes: str
    stock: CatalogStock

    @staticmethod
    def of(item: OrderItem) -> SnapshotItem:
        return SnapshotItem(
            backend_id=item.backend_id,
            name=item.name,
            quantity=item.quantity,
            price=item.price,
            notes=item.notes,
            stock=item.stock,
        )

    @property
    def stock_tracking_enabled(self) -> bool:
        return self.stock.stock_tracking_enabled


@dataclass
class Order:
    """Local copy of a placed order.

    Contact and payment fields are carried through untouched; the edit
    surface only changes items, total, status, instructions and the pickup
    time.
    """

    id: int | str
    items: list[OrderItem]
    total: Decimal
    status: OrderStatus
    restaurant_id: int | str | None = None
    user_id: int | str | None = None
    special_instructions: str = ""
    contact_name: str | None = None
    contact_phone: str | None = None
    contact_email: str | None = None
    payment_method: str | None = None
    payment_status: str | None = None
    payment_amount: Decimal | None = None
    transaction_id: str | None = None
    estimated_pickup_time: datetime | None = None
    requires_advance_notice: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> Order:
        # The order API is not consistent about camelCase vs snake_case.
        instructions = raw.get("special_instructions")
        if instructions is None:
            instructions = raw.get("specialInstructions") or ""
        pickup = raw.get("estimated_pickup_time") or raw.get("estimatedPickupTime")
        created = raw.get("created_at") or raw.get("createdAt")
        payment_amount = raw.get("payment_amount")
        return Order(
            id=raw["id"],
            items=[OrderItem.from_dict(i) for i in raw.get("items") or []],
            total=parse_amount(raw.get("total")),
            status=OrderStatus(raw.get("status") or OrderStatus.PENDING.value),
            restaurant_id=raw.get("restaurant_id"),
            user_id=raw.get("user_id"),
            special_instructions=instructions,
            contact_name=raw.get("contact_name"),
            contact_phone=raw.get("contact_phone"),
            contact_email=raw.get("contact_email"),
            payment_method=raw.get("payment_method"),
            payment_status=raw.get("payment_status"),
            payment_amount=None if payment_amount is None else parse_amount(payment_amount),
            transaction_id=raw.get("transaction_id"),
            estimated_pickup_time=parse_timestamp(pickup),
            requires_advance_notice=raw.get("requires_advance_notice") is True,
            created_at=parse_timestamp(created) or datetime.now(timezone.utc),
        )


def parse_timestamp(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(value: object) -> int | None:
    if value is None or value == "":
        return None
    return parse_quantity(value)
