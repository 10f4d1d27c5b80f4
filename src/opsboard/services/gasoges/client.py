"""HTTP client for the Gasoges fuel telemetry API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from ...config import Settings
from ...errors import ConfigurationError, TransportError, UpstreamError

logger = logging.getLogger(__name__)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class GasogesClient:
    """Basic-Auth client; each call opens and closes its own connection, no retries."""

    def __init__(
        self,
        config: Settings,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not config.gasoges_configured:
            logger.error("Gasoges API credentials are not configured")
            raise ConfigurationError("Gasoges API credentials are not configured.")
        self.base_url = config.gasoges_api_url.rstrip("/")
        self.auth = httpx.BasicAuth(config.gasoges_api_user, config.gasoges_api_pass)
        self.timeout = timeout if timeout is not None else config.upstream_timeout_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            auth=self.auth,
            timeout=httpx.Timeout(self.timeout),
            headers={"Accept": "application/json"},
            transport=self.transport,
        )

    def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}/{path}"
        client = self._get_client()
        try:
            try:
                response = client.get(url)
            except httpx.HTTPError as exc:
                logger.warning(f"Gasoges request to {path} failed: {exc}")
                raise TransportError(f"Failed to reach Gasoges API: {exc}") from exc
            if response.is_error:
                logger.warning(f"Gasoges answered {response.status_code} for {path}")
                raise UpstreamError(
                    f"Gasoges API error: {response.status_code}",
                    upstream_status=response.status_code,
                )
            try:
                return response.json()
            except ValueError as exc:
                raise TransportError(f"Gasoges API returned an unparseable body for {path}.") from exc
        finally:
            client.close()

    def list_depots(self) -> Any:
        return self._get_json("depositos")

    def depot_level(self, depot_id: Any, date: str) -> Any:
        return self._get_json(f"depositos/nivel/{_segment(depot_id)}/{_segment(date)}")

    def supplies(self, start: str, end: str) -> Any:
        return self._get_json(f"suministros/todos/{_segment(start)}/{_segment(end)}")

    def depot_supplies(self, depot_id: Any, start: str, end: str) -> Any:
        return self._get_json(
            f"suministros/deposito/{_segment(depot_id)}/{_segment(start)}/{_segment(end)}"
        )

