"""Domain service: Item Identity Tracker.

Answers two questions consistently for the whole edit session:

* "is this item new?": compared against the original snapshot by
  backend id (``is_new_item``), and
* "was this line added during this session?": answered only by the
  tag assigned when the line was created (``is_newly_added``).

The two differ for items picked from the catalog while editing: they carry
a backend id but were never reserved against this order.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from orderedit.domain.exceptions import ValidationError
from orderedit.domain.model.order import CatalogStock, OrderItem, SnapshotItem
from orderedit.domain.model.value_objects import normalize_backend_id, same_backend_id


@dataclass(frozen=True)
class ItemTag:
    is_new: bool


class ItemIdentityTracker:

    def __init__(self, original_items: list[OrderItem]) -> None:
        self._snapshot: tuple[SnapshotItem, ...] = tuple(
            SnapshotItem.of(item) for item in original_items
        )
        self._tags: dict[str, ItemTag] = {}
        for item in original_items:
            self.tag_original(item.edit_id)

    # --- Snapshot queries -----------------------------------------------------

    @property
    def snapshot(self) -> tuple[SnapshotItem, ...]:
        return self._snapshot

    def is_new_item(self, item: OrderItem) -> bool:
        if item.backend_id is None:
            return True
        return self.find_original(item) is None

    def find_original(self, item: OrderItem) -> SnapshotItem | None:
        for original in self._snapshot:
            if same_backend_id(original.backend_id, item.backend_id):
                return original
        return None

    def apply_enrichment(self, stock_by_backend_id: Mapping[str, CatalogStock]) -> None:
        """Replace the snapshot with copies carrying catalog stock flags."""
        enriched = []
        for original in self._snapshot:
            stock = stock_by_backend_id.get(normalize_backend_id(original.backend_id))
            if stock is None:
                enriched.append(original)
            else:
                enriched.append(
                    SnapshotItem(
                        backend_id=original.backend_id,
                        name=original.name,
                        quantity=original.quantity,
                        price=original.price,
                        notes=original.notes,
                        stock=stock,
                    )
                )
        self._snapshot = tuple(enriched)

    # --- Identity tags --------------------------------------------------------

    def tag_original(self, edit_id: str) -> None:
        self._tag(edit_id, ItemTag(is_new=False))

    def tag_new(self, edit_id: str) -> None:
        self._tag(edit_id, ItemTag(is_new=True))

    def is_newly_added(self, edit_id: str) -> bool:
        tag = self._tags.get(edit_id)
        return tag is not None and tag.is_new

    @property
    def tags(self) -> Mapping[str, ItemTag]:
        return MappingProxyType(self._tags)

    def _tag(self, edit_id: str, tag: ItemTag) -> None:
        if edit_id in self._tags:
            raise ValidationError(f"Item {edit_id} is already tracked")
        self._tags[edit_id] = tag
