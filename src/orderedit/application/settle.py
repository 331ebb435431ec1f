"""Settle-all combinator for best-effort batches.

Every unit of work is attempted independently; a unit that raises is
reported as a failed ``Settled`` instead of cancelling its siblings.
Results come back in submission order, tagged with the caller's key, so
merging never depends on which call finished first.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Iterable, TypeVar

K = TypeVar("K")
T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[K, T]):
    key: K
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _attempt(key: K, unit: Awaitable[T]) -> Settled[K, T]:
    try:
        return Settled(key, value=await unit)
    except Exception as exc:
        return Settled(key, error=exc)


async def settle_all(units: Iterable[tuple[K, Awaitable[T]]]) -> list[Settled[K, Any]]:
    return list(await asyncio.gather(*(_attempt(key, unit) for key, unit in units)))
