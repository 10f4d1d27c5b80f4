"""Typed failures raised by proxy handlers and mapped to JSON at the app boundary."""

from __future__ import annotations

from typing import Any

from fastapi import status


class ProxyError(Exception):
    """Base error carrying the HTTP status and message returned to the dashboard."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: int | None = None, extra: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.extra = dict(extra or {})

    def payload(self) -> dict[str, Any]:
        return {**self.extra, "error": self.message}


class ConfigurationError(ProxyError):
    """A credential, URL or identifier needed by the handler is not configured."""


class ClientInputError(ProxyError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ProxyError):
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamError(ProxyError):
    """The upstream API answered with a non-success status."""

    def __init__(self, message: str, *, upstream_status: int, extra: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=upstream_status, extra=extra)
        self.upstream_status = upstream_status


class TransportError(ProxyError):
    """Network failure, timeout or unparseable upstream body."""
