"""Abstract repository for the backend order API."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from orderedit.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    async def get_by_id(self, order_id: int | str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    async def update_order(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Persist an order update and return the backend's updated order."""
