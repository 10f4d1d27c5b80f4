"""Fuel supply endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from ...config import Settings, get_settings
from ...errors import ClientInputError
from ...schemas.supplies import SupplyListResponse, SupplyModel, SupplySummaryModel
from ...services.gasoges.client import GasogesClient
from ...services.kpis import summarize_supplies
from ...services.normalize import normalize_supplies

router = APIRouter(prefix="/supplies", tags=["supplies"])


@router.get("", response_model=SupplyListResponse, status_code=status.HTTP_200_OK)
def list_supplies(
    response: Response,
    start: str | None = Query(default=None, description="First day (YYYY-MM-DD)"),
    end: str | None = Query(default=None, description="Last day (YYYY-MM-DD)"),
    latest: int = Query(default=5, ge=0, le=100, description="Number of recent supplies in the summary"),
    config: Settings = Depends(get_settings),
) -> SupplyListResponse:
    if not start or not end:
        raise ClientInputError("Parameters 'start' and 'end' are required.")
    client = GasogesClient(config)
    supplies = normalize_supplies(client.supplies(start, end))
    response.headers["Cache-Control"] = "s-maxage=60, stale-while-revalidate"
    return SupplyListResponse(
        data=[SupplyModel.from_domain(item) for item in supplies],
        summary=SupplySummaryModel.from_summary(summarize_supplies(supplies, latest=latest)),
    )
