"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/upstreams", status_code=status.HTTP_200_OK)
def health_upstreams(config: Settings = Depends(get_settings)) -> dict:
    """Report which upstream integrations are configured; nothing is contacted."""
    return {
        "gasoges": {"configured": config.gasoges_configured},
        "mundosms": {"configured": bool(config.provider_api_token)},
        "flow_switch": {
            "configured": bool(
                config.pbx_ids
                and config.flow_id_day
                and config.flow_id_night
                and config.provider_api_base
                and config.provider_api_token
            ),
            "pbx_count": len(config.pbx_ids),
        },
        "contacts": {"configured": bool(config.firebase_key_base64)},
        "phonebook": {"available": config.phonebook_file.is_file()},
    }
