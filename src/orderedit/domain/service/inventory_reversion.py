"""Domain service: Inventory Reversion Decision Engine.

Decides, at the moment a line is removed, whether the administrator has to
say what happens to the physical stock.

Order of checks:
  1. Untracked items are removed silently.
  2. Lines added during this session are removed silently; their stock
     was never deducted against this order, even if the catalog tracks it.
  3. Tracked original lines need a disposition: return to inventory, or
     mark as damaged with a reason.
"""

from __future__ import annotations

from orderedit.domain.exceptions import ValidationError
from orderedit.domain.model.inventory import (
    DamagedItemRecord,
    Disposition,
    PendingRemoval,
    RemovalDecision,
)
from orderedit.domain.model.order import OrderItem
from orderedit.domain.service.item_identity_tracker import ItemIdentityTracker


class InventoryReversionDecisionEngine:

    def __init__(self, tracker: ItemIdentityTracker) -> None:
        self._tracker = tracker

    def decide(self, item: OrderItem) -> RemovalDecision:
        if not item.stock_tracking_enabled:
            return RemovalDecision.REMOVE
        if self._tracker.is_newly_added(item.edit_id):
            return RemovalDecision.REMOVE
        return RemovalDecision.PROMPT_DISPOSITION

    def resolve(
        self,
        pending: PendingRemoval,
        disposition: Disposition,
        reason: str | None = None,
    ) -> DamagedItemRecord | None:
        """Apply the chosen disposition.

        Returns the record to queue for ``MARK_AS_DAMAGED``, else None.  A
        line with no catalog id or no units has nothing to report.
        """
        if disposition is Disposition.RETURN_TO_INVENTORY:
            return None

        if disposition is not Disposition.MARK_AS_DAMAGED:
            raise ValidationError(f"Unknown disposition: {disposition!r}")
        if not reason or not reason.strip():
            raise ValidationError("A reason is required to mark items as damaged")

        item = pending.item
        if item.backend_id is None or item.quantity <= 0:
            return None
        return DamagedItemRecord(
            backend_id=item.backend_id,
            quantity=item.quantity,
            reason=reason.strip(),
        )
