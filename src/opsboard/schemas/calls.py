"""Call-center KPI and flow switch schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from ..services.flows import FlowSwitchResult


class CallKpisModel(BaseModel):
    waiting_now: int
    answered_today: int
    agents_online: int
    updated_at: datetime


class FlowAssignmentModel(BaseModel):
    pbx_id: str
    success: bool
    error: Optional[str] = None


class FlowSwitchResponse(BaseModel):
    ok: bool
    mode: str
    flow_id: str
    results: List[FlowAssignmentModel]

    @classmethod
    def from_result(cls, result: FlowSwitchResult) -> "FlowSwitchResponse":
        return cls(
            ok=result.ok,
            mode=result.mode,
            flow_id=result.flow_id,
            results=[
                FlowAssignmentModel(pbx_id=item.pbx_id, success=item.success, error=item.error)
                for item in result.results
            ],
        )
