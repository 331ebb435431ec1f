"""Application service: Show Order use case (query)."""

from __future__ import annotations

from orderedit.application.dto import OrderDTO, OrderLineItemDTO
from orderedit.domain.exceptions import EntityNotFoundError
from orderedit.domain.model.order import Order
from orderedit.domain.model.value_objects import Money
from orderedit.domain.repository.order_repository import OrderRepository
from orderedit.domain.service.eta_scheduler import ETAScheduler


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository, scheduler: ETAScheduler) -> None:
        self._order_repo = order_repo
        self._scheduler = scheduler

    async def handle(self, order_id: int | str) -> OrderDTO:
        order = await self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return self._to_dto(order)

    def _to_dto(self, order: Order) -> OrderDTO:
        pickup = order.estimated_pickup_time
        return OrderDTO(
            id=order.id,
            status=order.status.value,
            contact_name=order.contact_name or "",
            items=[
                OrderLineItemDTO(
                    position=position,
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=str(Money(item.price)),
                    line_total=str(item.line_total),
                    tracked=item.stock_tracking_enabled,
                )
                for position, item in enumerate(order.items, start=1)
            ],
            total=str(Money(order.total)),
            pickup_time=(
                pickup.astimezone(self._scheduler.timezone).strftime("%Y-%m-%d %H:%M %Z")
                if pickup is not None
                else "No pickup time set"
            ),
            requires_advance_notice=order.requires_advance_notice,
        )
