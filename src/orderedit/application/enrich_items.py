"""Application service: Enrich Items use case.

The edit surface is usable as soon as the order is loaded; catalog stock
flags arrive afterwards.  One lookup is issued per distinct backend id and
all of them are awaited together.  A lookup that fails leaves that item
with the values it already had.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from orderedit.application.settle import settle_all
from orderedit.domain.model.order import CatalogStock, OrderItem
from orderedit.domain.model.value_objects import normalize_backend_id
from orderedit.domain.repository.menu_item_repository import MenuItemRepository

logger = logging.getLogger(__name__)


class EnrichItemsHandler:

    def __init__(self, menu_item_repo: MenuItemRepository) -> None:
        self._menu_item_repo = menu_item_repo

    async def handle(self, items: Iterable[OrderItem]) -> dict[str, CatalogStock]:
        """Fetch stock flags for every distinct backend id among ``items``.

        Returns only the ids whose lookup succeeded.
        """
        backend_ids: dict[str, str | int] = {}
        for item in items:
            key = normalize_backend_id(item.backend_id)
            if key is not None and key not in backend_ids:
                backend_ids[key] = item.backend_id  # type: ignore[assignment]

        results = await settle_all(
            (key, self._menu_item_repo.get_by_id(raw_id))
            for key, raw_id in backend_ids.items()
        )

        stock_by_id: dict[str, CatalogStock] = {}
        for result in results:
            if not result.ok:
                logger.warning(
                    f"Catalog lookup failed for menu item {result.key}, "
                    f"keeping order values: {result.error}"
                )
                continue
            stock_by_id[result.key] = CatalogStock.from_catalog(result.value or {})

        logger.info(f"Enriched {len(stock_by_id)} of {len(backend_ids)} catalog items")
        return stock_by_id

    @staticmethod
    def merge(items: list[OrderItem], stock_by_id: Mapping[str, CatalogStock]) -> list[OrderItem]:
        """Apply catalog stock to the live list, matching rows by backend id.

        Only the stock mirror changes; quantities, prices, notes,
        customizations and payment status the user already edited survive.
        """
        merged: list[OrderItem] = []
        for item in items:
            stock = stock_by_id.get(normalize_backend_id(item.backend_id))
            merged.append(item if stock is None else item.with_stock(stock))
        return merged
