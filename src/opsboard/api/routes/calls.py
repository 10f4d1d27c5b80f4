"""Call-center endpoints proxied to the MundoSMS API."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from ...config import Settings, get_settings
from ...schemas.calls import CallKpisModel
from ...services.kpis import compute_call_kpis
from ...services.mundosms.client import MundoSmsClient
from ...services.normalize import parse_calls

router = APIRouter(tags=["calls"])

INBOUND_CALLS_QUERY = {"type": "in", "from_datetime": "", "from_id": "", "showall": "0"}


@router.get("/calls", status_code=status.HTTP_200_OK)
def list_calls(request: Request, config: Settings = Depends(get_settings)) -> Response:
    """Relay the call listing; every query parameter is forwarded upstream."""
    client = MundoSmsClient(config)
    body = client.list_calls(dict(request.query_params))
    if body.is_json:
        return JSONResponse(content=body.json, status_code=body.status_code)
    return Response(content=body.text, status_code=body.status_code, media_type=body.media_type)


@router.get("/kpis/calls", response_model=CallKpisModel, status_code=status.HTTP_200_OK)
def get_call_kpis(
    window_seconds: int | None = Query(default=None, ge=1, description="Window for calls counted as waiting"),
    agent_active_minutes: int | None = Query(default=None, ge=1, description="Window for agents counted as online"),
    config: Settings = Depends(get_settings),
) -> CallKpisModel:
    client = MundoSmsClient(config)
    calls = parse_calls(client.call_payload(INBOUND_CALLS_QUERY))
    now = datetime.now()
    kpis = compute_call_kpis(
        calls,
        now=now,
        window_seconds=window_seconds or config.calls_window_seconds,
        agent_active_minutes=agent_active_minutes or config.agent_active_minutes,
    )
    return CallKpisModel(
        waiting_now=kpis.waiting_now,
        answered_today=kpis.answered_today,
        agents_online=kpis.agents_online,
        updated_at=now,
    )
