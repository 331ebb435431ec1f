"""HTTP implementation of OrderRepository."""

from __future__ import annotations

from typing import Any

from orderedit.domain.exceptions import EntityNotFoundError
from orderedit.domain.model.order import Order
from orderedit.domain.repository.order_repository import OrderRepository
from orderedit.infrastructure.http.api_client import ApiClient


class HttpOrderRepository(OrderRepository):

    def __init__(self, client: ApiClient) -> None:
        self._client = client

    async def get_by_id(self, order_id: int | str) -> Order | None:
        try:
            raw = await self._client.call("GET", f"/orders/{order_id}")
        except EntityNotFoundError:
            return None
        return Order.from_dict(raw)

    async def update_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        return await self._client.call(
            "PATCH", f"/orders/{payload['id']}", json={"order": payload}
        )
