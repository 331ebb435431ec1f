"""JSON-file-backed implementation of OrderRepository.

Stores orders in the same shape the order API returns them, so the CLI
can be exercised without a backend.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from orderedit.domain.exceptions import EntityNotFoundError
from orderedit.domain.model.order import Order
from orderedit.domain.model.value_objects import same_backend_id
from orderedit.domain.repository.order_repository import OrderRepository


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    async def get_by_id(self, order_id: int | str) -> Order | None:
        raw = self._find_raw(self._load_raw(), order_id)
        return None if raw is None else Order.from_dict(raw)

    async def update_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        orders = self._load_raw()
        for i, raw in enumerate(orders):
            if same_backend_id(raw.get("id"), payload["id"]):
                orders[i] = {**raw, **payload}
                self._persist_raw(orders)
                return orders[i]
        raise EntityNotFoundError(f"Order #{payload['id']} not found")

    # --- File helpers ---------------------------------------------------------

    @staticmethod
    def _find_raw(orders: list[dict], order_id: int | str) -> dict | None:
        for raw in orders:
            if same_backend_id(raw.get("id"), order_id):
                return raw
        return None

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, orders: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(orders, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
