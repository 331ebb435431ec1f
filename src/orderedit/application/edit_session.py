"""Application service: Order Edit Session.

One session is the lifetime of one open order-edit surface.  It owns all
local state (live item list, original snapshot, identity tags, damaged-item
queue) and drives the save state machine:

    IDLE -> (AWAITING_ETA_INPUT) -> RECONCILING -> SAVED | FAILED

AWAITING_ETA_INPUT is entered only when the status being saved moves the
order into ``preparing``.  FAILED leaves local state untouched so the
administrator can save again.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Any, Callable

from orderedit.application.dto import OrderUpdatePayload, SaveOutcome
from orderedit.application.enrich_items import EnrichItemsHandler
from orderedit.application.save_order import SaveReconciliationPipeline, SaveRequest
from orderedit.domain.exceptions import (
    EntityNotFoundError,
    OrderPersistError,
    ValidationError,
)
from orderedit.domain.model.inventory import (
    DamagedItemQueue,
    DamagedItemRecord,
    Disposition,
    PendingRemoval,
    RemovalDecision,
)
from orderedit.domain.model.order import (
    CatalogStock,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
)
from orderedit.domain.model.value_objects import Money, parse_amount, parse_quantity
from orderedit.domain.repository.menu_item_repository import MenuItemRepository
from orderedit.domain.repository.order_repository import OrderRepository
from orderedit.domain.service.eta_scheduler import ETAScheduler
from orderedit.domain.service.inventory_reversion import InventoryReversionDecisionEngine
from orderedit.domain.service.item_identity_tracker import ItemIdentityTracker

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "quantity", "price", "notes", "customizations", "payment_status")


class SaveState(Enum):
    IDLE = "idle"
    AWAITING_ETA_INPUT = "awaiting_eta_input"
    RECONCILING = "reconciling"
    SAVED = "saved"
    FAILED = "failed"


class OrderEditSession:

    def __init__(
        self,
        order: Order,
        menu_item_repo: MenuItemRepository,
        order_repo: OrderRepository,
        scheduler: ETAScheduler,
        on_save: Callable[[OrderUpdatePayload], None] | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._order = order
        self._menu_item_repo = menu_item_repo
        self._scheduler = scheduler
        self._pipeline = SaveReconciliationPipeline(menu_item_repo, order_repo)
        self._on_save = on_save
        self._on_close = on_close

        # Live list is a copy; the order's own items stay as loaded.
        self._items: list[OrderItem] = [replace(item) for item in order.items]
        self._tracker = ItemIdentityTracker(self._items)
        self._engine = InventoryReversionDecisionEngine(self._tracker)
        self._damaged = DamagedItemQueue()

        self._original_status = order.status
        self._status = order.status
        self._total_text = str(order.total)
        self._instructions = order.special_instructions
        self._pending_removal: PendingRemoval | None = None
        self._pickup_time = None
        self._state = SaveState.IDLE
        self._closed = False

    # --- Lifecycle ------------------------------------------------------------

    async def open(self) -> None:
        """Enrich the already-usable item list with catalog stock flags."""
        handler = EnrichItemsHandler(self._menu_item_repo)
        stock_by_id = await handler.handle(list(self._items))
        if self._closed:
            return
        self._tracker.apply_enrichment(stock_by_id)
        self._items = handler.merge(self._items, stock_by_id)

    def close(self) -> None:
        """Cancel the edit; all local state is discarded unconditionally."""
        if self._closed:
            return
        self._closed = True
        self._items = []
        self._damaged.drain()
        self._pending_removal = None
        if self._on_close is not None:
            self._on_close()

    # --- Read access ----------------------------------------------------------

    @property
    def order(self) -> Order:
        return self._order

    @property
    def items(self) -> tuple[OrderItem, ...]:
        return tuple(self._items)

    @property
    def tracker(self) -> ItemIdentityTracker:
        return self._tracker

    @property
    def damaged_queue(self) -> DamagedItemQueue:
        return self._damaged

    @property
    def pending_removal(self) -> PendingRemoval | None:
        return self._pending_removal

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def total_text(self) -> str:
        return self._total_text

    @property
    def special_instructions(self) -> str:
        return self._instructions

    @property
    def is_closed(self) -> bool:
        return self._closed

    def subtotal(self) -> Money:
        result = Money.zero()
        for item in self._items:
            result = result + item.line_total
        return result.rounded()

    def default_eta_value(self) -> float | int:
        return self._scheduler.default_eta_value(self._order)

    # --- Item edits -----------------------------------------------------------

    def add_blank_item(self) -> OrderItem:
        item = OrderItem(name="", quantity=1, price=Decimal("0"))
        return self._add(item)

    def add_catalog_item(self, menu_item: dict[str, Any], quantity: int = 1) -> OrderItem:
        if menu_item.get("id") is None:
            raise ValidationError("Catalog item has no id")
        item = OrderItem(
            name=menu_item.get("name") or "",
            quantity=parse_quantity(quantity),
            price=parse_amount(menu_item.get("price")),
            backend_id=menu_item["id"],
            stock=CatalogStock.from_catalog(menu_item),
        )
        return self._add(item)

    def change_item(self, edit_id: str, field: str, value: Any) -> OrderItem:
        self._ensure_open()
        if field not in EDITABLE_FIELDS:
            raise ValidationError(f"Field '{field}' cannot be edited")
        item = self._find(edit_id)

        if field == "quantity":
            value = parse_quantity(value)
        elif field == "price":
            value = parse_amount(value)
        elif field == "payment_status":
            try:
                value = PaymentStatus(value)
            except ValueError as exc:
                raise ValidationError(f"Unknown payment status: {value!r}") from exc
        elif field in ("name", "notes"):
            value = "" if value is None else str(value)

        setattr(item, field, value)
        return item

    def request_removal(self, edit_id: str) -> RemovalDecision:
        """Remove a line, or suspend the removal until a disposition is chosen."""
        self._ensure_open()
        if self._pending_removal is not None:
            raise ValidationError("Another removal is waiting for a disposition")
        item = self._find(edit_id)

        decision = self._engine.decide(item)
        if decision is RemovalDecision.REMOVE:
            self._remove(edit_id)
        else:
            self._pending_removal = PendingRemoval(item)
        return decision

    def resolve_removal(
        self,
        disposition: Disposition,
        reason: str | None = None,
    ) -> DamagedItemRecord | None:
        self._ensure_open()
        pending = self._pending_removal
        if pending is None:
            raise ValidationError("No removal is waiting for a disposition")

        record = self._engine.resolve(pending, disposition, reason)
        self._remove(pending.edit_id)
        if record is not None:
            self._damaged.append(record)
        self._pending_removal = None
        return record

    def cancel_removal(self) -> None:
        """Keep the item; the administrator backed out of the prompt."""
        self._ensure_open()
        self._pending_removal = None

    # --- Order-level edits ----------------------------------------------------

    def set_status(self, status: OrderStatus | str) -> None:
        self._ensure_open()
        try:
            self._status = status if isinstance(status, OrderStatus) else OrderStatus(status)
        except ValueError as exc:
            raise ValidationError(f"Unknown order status: {status!r}") from exc

    def set_total(self, text: str) -> None:
        self._ensure_open()
        self._total_text = "" if text is None else str(text)

    def set_instructions(self, text: str) -> None:
        self._ensure_open()
        self._instructions = "" if text is None else str(text)

    # --- Save state machine ---------------------------------------------------

    @property
    def needs_eta_prompt(self) -> bool:
        return self._scheduler.needs_eta_prompt(self._order, self._status, self._original_status)

    async def save(self) -> SaveOutcome | None:
        """Start a save.

        Returns None when the ETA prompt has to be answered first (see
        ``confirm_eta``); raises OrderPersistError when persistence fails.
        """
        self._ensure_open()
        if self._state not in (SaveState.IDLE, SaveState.FAILED):
            raise ValidationError(f"Cannot save while {self._state.value}")
        if self._pending_removal is not None:
            raise ValidationError("Choose what happens to the removed item before saving")

        self._state = SaveState.IDLE
        if self.needs_eta_prompt:
            self._state = SaveState.AWAITING_ETA_INPUT
            return None
        self._pickup_time = None
        return await self._reconcile()

    async def confirm_eta(self, eta_value: float | int | str) -> SaveOutcome:
        self._ensure_open()
        if self._state is not SaveState.AWAITING_ETA_INPUT:
            raise ValidationError("No ETA is being asked for")
        self._pickup_time = self._scheduler.compute_pickup_time(self._order, eta_value)
        return await self._reconcile()

    def cancel_eta(self) -> None:
        if self._state is SaveState.AWAITING_ETA_INPUT:
            self._state = SaveState.IDLE

    async def _reconcile(self) -> SaveOutcome:
        self._state = SaveState.RECONCILING
        request = SaveRequest(
            order=self._order,
            items=tuple(self._items),
            tracker=self._tracker,
            total_text=self._total_text,
            status=self._status,
            special_instructions=self._instructions,
            pickup_time=self._pickup_time,
        )
        try:
            outcome = await self._pipeline.run(request, self._damaged)
        except OrderPersistError:
            self._state = SaveState.FAILED
            raise

        self._state = SaveState.SAVED
        if self._closed:
            logger.info(f"Order #{self._order.id} saved after its editor was closed")
            return outcome
        if self._on_save is not None:
            self._on_save(outcome.payload)
        return outcome

    # --- Internal helpers -----------------------------------------------------

    def _add(self, item: OrderItem) -> OrderItem:
        self._ensure_open()
        self._tracker.tag_new(item.edit_id)
        self._items.append(item)
        return item

    def _find(self, edit_id: str) -> OrderItem:
        for item in self._items:
            if item.edit_id == edit_id:
                return item
        raise EntityNotFoundError(f"Item {edit_id} is not on this order")

    def _remove(self, edit_id: str) -> None:
        self._items = [item for item in self._items if item.edit_id != edit_id]

    def _ensure_open(self) -> None:
        if self._closed:
            raise ValidationError("This edit session is closed")
