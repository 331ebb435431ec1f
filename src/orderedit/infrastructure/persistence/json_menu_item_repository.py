"""JSON-file-backed implementation of MenuItemRepository."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from orderedit.domain.exceptions import EntityNotFoundError, ValidationError
from orderedit.domain.model.value_objects import same_backend_id
from orderedit.domain.repository.menu_item_repository import MenuItemRepository


class JsonMenuItemRepository(MenuItemRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- MenuItemRepository interface -----------------------------------------

    async def get_by_id(self, menu_item_id: str | int) -> dict[str, Any]:
        for raw in self._load():
            if same_backend_id(raw.get("id"), menu_item_id):
                return dict(raw)
        raise EntityNotFoundError(f"Menu item {menu_item_id} not found")

    async def mark_as_damaged(
        self,
        menu_item_id: str | int,
        quantity: int,
        reason: str,
        order_id: int | str,
    ) -> None:
        """Move ``quantity`` units from stock to the damaged count."""
        if quantity <= 0:
            raise ValidationError("Damaged quantity must be positive")

        items = self._load()
        for raw in items:
            if same_backend_id(raw.get("id"), menu_item_id):
                stock = raw.get("stock_quantity") or 0
                raw["stock_quantity"] = max(0, stock - quantity)
                raw["damaged_quantity"] = (raw.get("damaged_quantity") or 0) + quantity
                raw.setdefault("damage_log", []).append(
                    {"quantity": quantity, "reason": reason, "order_id": order_id}
                )
                self._persist(items)
                return
        raise EntityNotFoundError(f"Menu item {menu_item_id} not found")

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> list[dict[str, Any]]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist(self, items: list[dict[str, Any]]) -> None:
        self._file_path.write_text(
            json.dumps(items, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
