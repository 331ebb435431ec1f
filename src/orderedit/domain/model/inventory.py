"""Inventory bookkeeping for an edit session.

Nothing here touches the backend's stock ledger.  Damaged-item records are
queued locally and flushed in one batch when the order is saved; the
inventory-change summary is informational only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from orderedit.domain.exceptions import ValidationError
from orderedit.domain.model.order import OrderItem


class Disposition(Enum):
    RETURN_TO_INVENTORY = "return_to_inventory"
    MARK_AS_DAMAGED = "mark_as_damaged"


class RemovalDecision(Enum):
    REMOVE = "remove"
    PROMPT_DISPOSITION = "prompt_disposition"


@dataclass(frozen=True)
class PendingRemoval:
    """A removal suspended until the administrator picks a disposition."""

    item: OrderItem

    @property
    def edit_id(self) -> str:
        return self.item.edit_id


@dataclass(frozen=True)
class DamagedItemRecord:
    backend_id: str | int
    quantity: int
    reason: str

    def __post_init__(self) -> None:
        if not self.reason or not self.reason.strip():
            raise ValidationError("A reason is required to mark items as damaged")
        if self.quantity <= 0:
            raise ValidationError("Damaged quantity must be positive")


class DamagedItemQueue:
    """Append-only queue of damaged-item records, drained once per save."""

    def __init__(self) -> None:
        self._records: list[DamagedItemRecord] = []

    def append(self, record: DamagedItemRecord) -> None:
        self._records.append(record)

    def drain(self) -> list[DamagedItemRecord]:
        """Return every queued record and leave the queue empty."""
        records, self._records = self._records, []
        return records

    @property
    def records(self) -> tuple[DamagedItemRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)


@dataclass(frozen=True)
class InventoryChange:
    """Net quantity change for one tracked catalog item."""

    backend_id: str
    name: str
    original_quantity: int
    new_quantity: int

    @property
    def delta(self) -> int:
        return self.new_quantity - self.original_quantity

    @property
    def removed(self) -> bool:
        return self.original_quantity > 0 and self.new_quantity == 0

    @property
    def added(self) -> bool:
        return self.original_quantity == 0 and self.new_quantity > 0
