"""Thin client for the restaurant backend's REST API.

Blocking ``requests`` calls are run in worker threads so the edit session's
event loop can keep several lookups in flight at once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import requests

from orderedit.domain.exceptions import EntityNotFoundError, ExternalServiceError

logger = logging.getLogger(__name__)

# Catalog endpoints are scoped to a restaurant via a query parameter.
RESTAURANT_CONTEXT_ENDPOINTS = ("menu_items", "menus", "categories", "option_groups", "options")


class ApiClient:

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        restaurant_id: str | None = None,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._restaurant_id = restaurant_id
        self._timeout = timeout
        self._session = session or requests.Session()

    async def call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        return await asyncio.to_thread(self.request, method, path, params, json)

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        params = dict(params or {})
        if self._restaurant_id and any(e in path for e in RESTAURANT_CONTEXT_ENDPOINTS):
            params.setdefault("restaurant_id", self._restaurant_id)

        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        logger.debug(f"{method} {url}")
        try:
            response = self._session.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status == 404:
                raise EntityNotFoundError(f"{method} {path}: not found") from exc
            raise ExternalServiceError(f"{method} {path} failed with HTTP {status}") from exc
        except requests.RequestException as exc:
            raise ExternalServiceError(f"{method} {path} failed: {exc}") from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ExternalServiceError(f"{method} {path} returned invalid JSON") from exc
