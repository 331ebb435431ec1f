"""Domain service: ETA Scheduler.

Turns the number an administrator picks in the ETA prompt into an absolute
pickup timestamp, and decides when a status change has to stop and ask
for one.

The prompt value means two different things:

* immediate orders: minutes from now (``15`` => now + 15 minutes);
* advance-notice orders: ``hour.fraction`` for tomorrow, where a
  fraction of ``3`` means half past (``10.3`` => tomorrow 10:30, restaurant
  local time) and anything else means on the hour.
"""

from __future__ import annotations

import math
from datetime import datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable

import pytz

from orderedit.domain.exceptions import ValidationError
from orderedit.domain.model.order import Order, OrderStatus
from orderedit.domain.model.value_objects import MAX_EXPONENT

DEFAULT_TIMEZONE = "Pacific/Guam"
DEFAULT_ADVANCE_ETA = 10.0
DEFAULT_IMMEDIATE_ETA = 5
ETA_STEP_MINUTES = 5


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _status_value(status: OrderStatus | str) -> str:
    return status.value if isinstance(status, OrderStatus) else str(status)


class ETAScheduler:

    def __init__(
        self,
        timezone_name: str = DEFAULT_TIMEZONE,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        try:
            self._tz = pytz.timezone(timezone_name)
        except pytz.UnknownTimeZoneError as exc:
            raise ValidationError(f"Unknown timezone: {timezone_name!r}") from exc
        self._now = now

    @property
    def timezone(self) -> pytz.BaseTzInfo:
        return self._tz

    @staticmethod
    def needs_eta_prompt(
        order: Order,
        new_status: OrderStatus | str,
        original_status: OrderStatus | str,
    ) -> bool:
        """Only a move *into* preparing asks for an ETA."""
        preparing = OrderStatus.PREPARING.value
        return (
            _status_value(new_status) == preparing
            and _status_value(original_status) != preparing
        )

    def compute_pickup_time(self, order: Order, eta_value: float | int | str | Decimal) -> datetime:
        if order.requires_advance_notice:
            hour, minute = self._split_hour_value(eta_value)
            local_today = self._now().astimezone(self._tz).date()
            tomorrow = local_today + timedelta(days=1)
            return self._tz.localize(datetime.combine(tomorrow, time(hour, minute)))

        minutes = self._to_decimal(eta_value)
        if minutes < 0:
            raise ValidationError(f"ETA cannot be negative, got {eta_value!r}")
        try:
            return self._now() + timedelta(minutes=float(minutes))
        except OverflowError as exc:
            raise ValidationError(f"Invalid ETA value: {eta_value!r}") from exc

    def default_eta_value(self, order: Order) -> float | int:
        """Prompt value to pre-select: the order's current pickup time, if any."""
        pickup = order.estimated_pickup_time

        if order.requires_advance_notice:
            if pickup is None:
                return DEFAULT_ADVANCE_ETA
            local = pickup.astimezone(self._tz)
            return local.hour + (0.3 if local.minute >= 30 else 0.0)

        if pickup is None:
            return DEFAULT_IMMEDIATE_ETA
        minutes_left = (pickup - self._now()).total_seconds() / 60
        rounded = math.ceil(minutes_left / ETA_STEP_MINUTES) * ETA_STEP_MINUTES
        return max(DEFAULT_IMMEDIATE_ETA, rounded)

    @staticmethod
    def format_pickup_time(value: datetime) -> str:
        """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
        utc = value.astimezone(timezone.utc)
        return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"

    # --- Internal helpers -----------------------------------------------------

    @classmethod
    def _split_hour_value(cls, eta_value: float | int | str | Decimal) -> tuple[int, int]:
        text = format(cls._to_decimal(eta_value).normalize(), "f")
        hour_str, _, fraction = text.partition(".")
        hour = int(hour_str)
        if not 0 <= hour <= 23:
            raise ValidationError(f"Pickup hour must be between 0 and 23, got {hour}")
        return hour, 30 if fraction == "3" else 0

    @staticmethod
    def _to_decimal(eta_value: float | int | str | Decimal) -> Decimal:
        try:
            value = Decimal(str(eta_value))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid ETA value: {eta_value!r}") from exc
        if not value.is_finite() or value.adjusted() > MAX_EXPONENT:
            raise ValidationError(f"Invalid ETA value: {eta_value!r}")
        return value
