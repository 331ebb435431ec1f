"""Application service: Save Reconciliation Pipeline.

Turns the edit surface's local state into one persisted order update.
The four steps always run in this order:

  1. summarize_inventory_changes: pure, informational only.
  2. flush_damaged_items:        best-effort; one call per queued record,
                                  run concurrently; failures are logged and
                                  never stop the save.  The queue is empty
                                  afterwards whatever happened.
  3. assemble_payload:           build the backend update payload.
  4. persist:                    the single fatal step; a rejection is
                                  raised as OrderPersistError, no retry.

Stock itself is never mutated from here; the backend adjusts its ledger
when it applies the persisted order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from orderedit.application.dto import (
    FlushReport,
    ItemPayload,
    OrderUpdatePayload,
    SaveOutcome,
)
from orderedit.application.settle import settle_all
from orderedit.domain.exceptions import OrderPersistError
from orderedit.domain.model.inventory import DamagedItemQueue, InventoryChange
from orderedit.domain.model.order import Order, OrderItem, OrderStatus
from orderedit.domain.model.value_objects import normalize_backend_id, parse_amount
from orderedit.domain.repository.menu_item_repository import MenuItemRepository
from orderedit.domain.repository.order_repository import OrderRepository
from orderedit.domain.service.item_identity_tracker import ItemIdentityTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveRequest:
    """Everything the pipeline reads from the edit session.

    ``pickup_time`` is the freshly computed ETA when the prompt ran; None
    keeps the order's existing pickup time.
    """

    order: Order
    items: tuple[OrderItem, ...]
    tracker: ItemIdentityTracker
    total_text: str
    status: OrderStatus
    special_instructions: str
    pickup_time: datetime | None = None


class SaveReconciliationPipeline:

    def __init__(
        self,
        menu_item_repo: MenuItemRepository,
        order_repo: OrderRepository,
    ) -> None:
        self._menu_item_repo = menu_item_repo
        self._order_repo = order_repo

    async def run(self, request: SaveRequest, damaged_queue: DamagedItemQueue) -> SaveOutcome:
        changes = self.summarize_inventory_changes(request)
        flush_report = await self.flush_damaged_items(request.order, damaged_queue)
        payload = self.assemble_payload(request)
        updated = await self.persist(payload)
        return SaveOutcome(
            updated_order=updated,
            payload=payload,
            inventory_changes=changes,
            flush_report=flush_report,
        )

    # --- Step 1 ---------------------------------------------------------------

    @staticmethod
    def summarize_inventory_changes(request: SaveRequest) -> list[InventoryChange]:
        original: dict[str, int] = {}
        current: dict[str, int] = {}
        names: dict[str, str] = {}

        for snap in request.tracker.snapshot:
            key = normalize_backend_id(snap.backend_id)
            if key is None or not snap.stock_tracking_enabled:
                continue
            original[key] = original.get(key, 0) + snap.quantity
            names[key] = snap.name

        for item in request.items:
            key = normalize_backend_id(item.backend_id)
            if key is None or not item.stock_tracking_enabled:
                continue
            current[key] = current.get(key, 0) + item.quantity
            names.setdefault(key, item.name)

        changes = [
            InventoryChange(
                backend_id=key,
                name=names[key],
                original_quantity=original.get(key, 0),
                new_quantity=current.get(key, 0),
            )
            for key in sorted(set(original) | set(current))
            if original.get(key, 0) != current.get(key, 0)
        ]
        for change in changes:
            logger.info(
                f"Order #{request.order.id}: {change.name} (menu item {change.backend_id}) "
                f"quantity {change.original_quantity} -> {change.new_quantity}"
            )
        return changes

    # --- Step 2 ---------------------------------------------------------------

    async def flush_damaged_items(self, order: Order, damaged_queue: DamagedItemQueue) -> FlushReport:
        records = damaged_queue.drain()
        if not records:
            return FlushReport(succeeded=[], failed=[])

        results = await settle_all(
            (
                record,
                self._menu_item_repo.mark_as_damaged(
                    record.backend_id,
                    quantity=record.quantity,
                    reason=record.reason,
                    order_id=order.id,
                ),
            )
            for record in records
        )

        succeeded = [r.key for r in results if r.ok]
        failed = [(r.key, r.error) for r in results if not r.ok]
        for record, error in failed:
            logger.warning(
                f"Failed to mark {record.quantity} of menu item {record.backend_id} "
                f"as damaged for order #{order.id}: {error}"
            )
        logger.info(
            f"Damaged-item flush for order #{order.id}: "
            f"{len(succeeded)} reported, {len(failed)} failed"
        )
        return FlushReport(succeeded=succeeded, failed=failed)  # type: ignore[arg-type]

    # --- Step 3 ---------------------------------------------------------------

    @staticmethod
    def assemble_payload(request: SaveRequest) -> OrderUpdatePayload:
        order = request.order
        tracker = request.tracker
        pickup = request.pickup_time or order.estimated_pickup_time
        return OrderUpdatePayload(
            id=order.id,
            restaurant_id=order.restaurant_id,
            user_id=order.user_id,
            items=[
                ItemPayload.from_item(
                    item, include_payment_status=tracker.is_newly_added(item.edit_id)
                )
                for item in request.items
            ],
            total=parse_amount(request.total_text),
            status=request.status.value,
            special_instructions=request.special_instructions,
            estimated_pickup_time=pickup,
            pass_through={
                "contact_name": order.contact_name,
                "contact_phone": order.contact_phone,
                "contact_email": order.contact_email,
                "payment_method": order.payment_method,
                "payment_status": order.payment_status,
                "payment_amount": order.payment_amount,
                "transaction_id": order.transaction_id,
            },
        )

    # --- Step 4 ---------------------------------------------------------------

    async def persist(self, payload: OrderUpdatePayload) -> dict:
        try:
            return await self._order_repo.update_order(payload.to_dict())
        except Exception as exc:
            logger.error(f"Failed to save order #{payload.id}: {exc}")
            raise OrderPersistError(f"Failed to save order #{payload.id}") from exc
