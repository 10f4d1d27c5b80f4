"""HTTP client for the MundoSMS call-center / PBX API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from ...config import Settings
from ...errors import ConfigurationError, TransportError, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RelayedBody:
    """Upstream body kept as JSON when it parses, otherwise as raw text."""

    status_code: int
    json: Any = None
    text: str | None = None
    media_type: str = "text/plain"

    @property
    def is_json(self) -> bool:
        return self.text is None


class MundoSmsClient:
    def __init__(
        self,
        config: Settings,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not config.provider_api_token:
            logger.error("PROVIDER_API_TOKEN is not configured")
            raise ConfigurationError("Missing PROVIDER_API_TOKEN")
        self.token = config.provider_api_token
        self.calls_url = f"{config.mundosms_api_url.rstrip('/')}/list_voipcalls"
        self.provider_base = config.provider_api_base.rstrip("/") if config.provider_api_base else None
        self.timeout = timeout if timeout is not None else config.upstream_timeout_seconds
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            headers={"Authorization": f"Bearer {self.token}"},
            transport=self.transport,
        )

    def list_calls(self, params: Mapping[str, str] | None = None) -> RelayedBody:
        """Fetch call records, keeping the body as JSON or text like the upstream sent it."""
        client = self._get_client()
        try:
            try:
                response = client.get(self.calls_url, params=dict(params or {}))
            except httpx.HTTPError as exc:
                logger.warning(f"MundoSMS call listing failed: {exc}")
                raise TransportError(f"Failed to reach MundoSMS API: {exc}") from exc
        finally:
            client.close()

        if response.is_error:
            logger.warning(f"MundoSMS answered {response.status_code} for list_voipcalls")
            raise UpstreamError(
                f"MundoSMS API error: {response.status_code}",
                upstream_status=response.status_code,
            )
        try:
            return RelayedBody(status_code=response.status_code, json=response.json())
        except ValueError:
            media_type = response.headers.get("content-type", "text/plain")
            return RelayedBody(status_code=response.status_code, text=response.text, media_type=media_type)

    def call_payload(self, params: Mapping[str, str] | None = None) -> Any:
        body = self.list_calls(params)
        if not body.is_json:
            raise TransportError("MundoSMS API returned a non-JSON call listing.")
        return body.json

    def assign_flow(self, pbx_id: str, flow_id: str) -> Any:
        """Assign ``flow_id`` to one PBX line; raises on any failure."""
        if not self.provider_base:
            raise ConfigurationError("Missing PROVIDER_API_BASE")
        client = self._get_client()
        try:
            try:
                response = client.post(
                    f"{self.provider_base}/pbx/flows/assign",
                    json={"pbx_id": pbx_id, "flow_id": flow_id},
                )
            except httpx.HTTPError as exc:
                raise TransportError(f"Failed to reach provider API: {exc}") from exc
        finally:
            client.close()

        if response.is_error:
            raise UpstreamError(
                f"{response.status_code} {response.reason_phrase}".strip(),
                upstream_status=response.status_code,
            )
        try:
            return response.json()
        except ValueError:
            return {}
