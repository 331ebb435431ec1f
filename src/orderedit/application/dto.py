"""Data Transfer Objects — plain containers that cross layer boundaries.

``OrderUpdatePayload`` is the only shape that leaves the process: it is
what the order API's update contract accepts.  Everything session-local
(edit ids, identity tags) stops here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from orderedit.domain.model.inventory import DamagedItemRecord, InventoryChange
from orderedit.domain.model.order import OrderItem
from orderedit.domain.service.eta_scheduler import ETAScheduler


def _wire_amount(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


@dataclass(frozen=True)
class ItemPayload:
    """A line item trimmed to the fields the backend cares about."""

    id: str | int | None
    name: str
    price: Decimal
    quantity: int
    notes: str
    customizations: dict[str, Any] | None
    payment_status: str | None = None
    stock: dict[str, Any] | None = None  # only for tracked items
    menu_item_id: str | int | None = None

    @staticmethod
    def from_item(item: OrderItem, include_payment_status: bool) -> ItemPayload:
        stock = None
        if item.stock_tracking_enabled:
            stock = {
                "enable_stock_tracking": True,
                "stock_quantity": item.stock.stock_quantity,
                "damaged_quantity": item.stock.damaged_quantity,
                "low_stock_threshold": item.stock.low_stock_threshold,
            }
        if item.line_id is not None:
            line_id, menu_item_id = item.line_id, item.backend_id
        else:
            line_id, menu_item_id = item.backend_id, None
        return ItemPayload(
            id=line_id,
            name=item.name,
            price=item.price,
            quantity=item.quantity,
            notes=item.notes,
            customizations=item.customizations,
            payment_status=item.payment_status.value if include_payment_status else None,
            stock=stock,
            menu_item_id=menu_item_id,
        )

    def to_dict(self) -> dict[str, Any]:
        raw: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "price": _wire_amount(self.price),
            "quantity": self.quantity,
            "notes": self.notes,
            "customizations": self.customizations,
        }
        if self.menu_item_id is not None:
            raw["menu_item_id"] = self.menu_item_id
        if self.payment_status is not None:
            raw["payment_status"] = self.payment_status
        if self.stock is not None:
            raw.update(self.stock)
        return raw


@dataclass(frozen=True)
class OrderUpdatePayload:
    id: int | str
    items: list[ItemPayload]
    total: Decimal
    status: str
    special_instructions: str
    estimated_pickup_time: datetime | None
    restaurant_id: int | str | None = None
    user_id: int | str | None = None
    # contact and payment fields, passed through unchanged
    pass_through: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        pickup = self.estimated_pickup_time
        raw: dict[str, Any] = {
            "id": self.id,
            "restaurant_id": self.restaurant_id,
            "user_id": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "total": _wire_amount(self.total),
            "status": self.status,
            "special_instructions": self.special_instructions,
            "estimated_pickup_time": (
                None if pickup is None else ETAScheduler.format_pickup_time(pickup)
            ),
        }
        for key, value in self.pass_through.items():
            if value is None:
                continue
            raw[key] = _wire_amount(value) if isinstance(value, Decimal) else value
        return raw


@dataclass(frozen=True)
class FlushReport:
    """Outcome of one damaged-item flush; failures are not retried."""

    succeeded: list[DamagedItemRecord]
    failed: list[tuple[DamagedItemRecord, Exception]]

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)


@dataclass(frozen=True)
class SaveOutcome:
    updated_order: dict[str, Any]
    payload: OrderUpdatePayload
    inventory_changes: list[InventoryChange]
    flush_report: FlushReport


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    position: int
    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    tracked: bool


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int | str
    status: str
    contact_name: str
    items: list[OrderLineItemDTO]
    total: str
    pickup_time: str
    requires_advance_notice: bool
