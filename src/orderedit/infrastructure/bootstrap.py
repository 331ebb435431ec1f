"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from orderedit.domain.repository.menu_item_repository import MenuItemRepository
from orderedit.domain.repository.order_repository import OrderRepository
from orderedit.domain.service.eta_scheduler import ETAScheduler
from orderedit.infrastructure.config import Settings
from orderedit.infrastructure.http.api_client import ApiClient
from orderedit.infrastructure.http.http_menu_item_repository import (
    HttpMenuItemRepository,
)
from orderedit.infrastructure.http.http_order_repository import HttpOrderRepository
from orderedit.infrastructure.persistence.json_menu_item_repository import (
    JsonMenuItemRepository,
)
from orderedit.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)


def _api_client(settings: Settings) -> ApiClient:
    return ApiClient(
        base_url=settings.api_base_url or "",
        token=settings.api_token,
        restaurant_id=settings.restaurant_id,
        timeout=settings.http_timeout,
    )


def menu_item_repository(settings: Settings) -> MenuItemRepository:
    if settings.backend == "http":
        return HttpMenuItemRepository(_api_client(settings))
    return JsonMenuItemRepository(settings.data_dir / "menu_items.json")


def order_repository(settings: Settings) -> OrderRepository:
    if settings.backend == "http":
        return HttpOrderRepository(_api_client(settings))
    return JsonOrderRepository(settings.data_dir / "orders.json")


def eta_scheduler(settings: Settings) -> ETAScheduler:
    return ETAScheduler(timezone_name=settings.timezone)
