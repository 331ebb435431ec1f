"""Abstract repository for catalog (menu item) lookups and damage reports.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (HTTP, JSON file, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class MenuItemRepository(ABC):

    @abstractmethod
    async def get_by_id(self, menu_item_id: str | int) -> dict[str, Any]:
        """Return the catalog record for a menu item.

        Raises EntityNotFoundError or ExternalServiceError on failure.
        """

    @abstractmethod
    async def mark_as_damaged(
        self,
        menu_item_id: str | int,
        quantity: int,
        reason: str,
        order_id: int | str,
    ) -> None:
        """Report ``quantity`` units of a menu item as damaged."""
