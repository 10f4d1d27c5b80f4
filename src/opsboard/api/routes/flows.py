"""PBX routing-flow switch endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from ...config import Settings, get_settings
from ...schemas.calls import FlowSwitchResponse
from ...services.flows import plan_switch, switch_flow
from ...services.mundosms.client import MundoSmsClient

router = APIRouter(tags=["flows"])


@router.post(
    "/switch-flow",
    response_model=FlowSwitchResponse,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_207_MULTI_STATUS: {"model": FlowSwitchResponse}},
)
def switch_routing_flow(
    mode: str | None = Query(default=None, description="day or night"),
    pbx: str | None = Query(default=None, description="Apply to a single PBX instead of every configured one"),
    config: Settings = Depends(get_settings),
) -> JSONResponse:
    plan = plan_switch(mode, pbx, config)
    result = switch_flow(MundoSmsClient(config), plan)
    payload = FlowSwitchResponse.from_result(result).model_dump(exclude_none=True)
    return JSONResponse(
        content=payload,
        status_code=status.HTTP_200_OK if result.ok else status.HTTP_207_MULTI_STATUS,
    )
