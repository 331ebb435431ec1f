"""HTTP implementation of MenuItemRepository."""

from __future__ import annotations

from typing import Any

from orderedit.domain.repository.menu_item_repository import MenuItemRepository
from orderedit.infrastructure.http.api_client import ApiClient


class HttpMenuItemRepository(MenuItemRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def get_by_id(self, menu_item_id: str | int) -> dict[str, Any]:
        return await self._client.call("GET", f"/menu_items/{menu_item_id}")

    async def mark_as_damaged(
        self,
        menu_item_id: str | int,
        quantity: int,
        reason: str,
        order_id: int | str,
    ) -> None:
        await self._client.call(
            "POST",
            f"/menu_items/{menu_item_id}/mark_as_damaged",
            json={"quantity": quantity, "reason": reason, "order_id": order_id},
        )
