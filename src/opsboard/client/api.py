"""HTTP client for the dashboard's own proxy API."""

from __future__ import annotations

import logging
from typing import Any, Literal

import httpx

from ..models.domain import Depot, Supply
from ..services.normalize import normalize_depots, normalize_supplies

logger = logging.getLogger(__name__)

ApiStatus = Literal["idle", "ok", "error"]

GASOGES = "gasoges"
MUNDOSMS = "mundosms"


class DashboardApi:
    """Talks to the proxy endpoints and remembers whether each upstream last answered."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.status: dict[str, ApiStatus] = {GASOGES: "idle", MUNDOSMS: "idle"}

    def _get(self, upstream: str, path: str, params: dict[str, Any] | None = None) -> Any:
        with httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json"},
            transport=self.transport,
        ) as client:
            try:
                response = client.get(path, params=params)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError):
                self.status[upstream] = "error"
                logger.warning(f"Dashboard request {path} failed")
                raise
        self.status[upstream] = "ok"
        return payload

    def depot_status(self, date: str | None = None) -> list[Depot]:
        params = {"date": date} if date else None
        return normalize_depots(self._get(GASOGES, "/depots/status", params))

    def supplies(self, start: str, end: str) -> list[Supply]:
        return normalize_supplies(self._get(GASOGES, "/supplies", {"start": start, "end": end}))

    def call_kpis(self) -> dict[str, Any]:
        return self._get(MUNDOSMS, "/kpis/calls")
