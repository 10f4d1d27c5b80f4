"""Depot (fuel tank) endpoints proxied to the Gasoges API."""

from __future__ import annotations

from datetime import date as date_type

from fastapi import APIRouter, Body, Depends, Path, Query, Response, status

from ...config import Settings, get_settings
from ...errors import ClientInputError
from ...schemas.depots import (
    DepotLevelModel,
    DepotLevelRequest,
    DepotListResponse,
    DepotModel,
    EstimatedStateModel,
    LowLevelResponse,
)
from ...schemas.supplies import SupplyListResponse, SupplyModel
from ...services.depots import collect_depot_status, estimate_state, fetch_depot_level, fetch_depot_supplies
from ...services.gasoges.client import GasogesClient
from ...services.kpis import split_low_level
from ...services.normalize import normalize_depots, parse_int

router = APIRouter(prefix="/depots", tags=["depots"])

SHARED_FIVE_MINUTES = "s-maxage=300, stale-while-revalidate"
NO_CACHE = "no-cache"


def _require_range(start: str | None, end: str | None) -> None:
    if not start or not end:
        raise ClientInputError("Parameters 'start' and 'end' are required.")


@router.get("", response_model=DepotListResponse, status_code=status.HTTP_200_OK)
def list_depots(response: Response, config: Settings = Depends(get_settings)) -> DepotListResponse:
    client = GasogesClient(config)
    depots = normalize_depots(client.list_depots())
    response.headers["Cache-Control"] = SHARED_FIVE_MINUTES
    return DepotListResponse(data=[DepotModel.from_domain(depot) for depot in depots])


def _level_depot_id(depot_id: str | int) -> int | str:
    """Integer id like the depot listings, falling back to the raw text."""
    parsed = parse_int(depot_id)
    return parsed if parsed is not None else str(depot_id)


def _depot_level(depot_id: str | int | None, date: str | None, config: Settings, response: Response) -> DepotLevelModel:
    if depot_id in (None, "") or not date:
        raise ClientInputError("Parameters 'id' and 'date' are required.")
    client = GasogesClient(config)
    level = fetch_depot_level(client, depot_id, date)
    response.headers["Cache-Control"] = NO_CACHE
    return DepotLevelModel(depot_id=_level_depot_id(depot_id), date=date, current_liters=level)


@router.get("/level", response_model=DepotLevelModel, status_code=status.HTTP_200_OK)
def get_depot_level(
    response: Response,
    depot_id: str | None = Query(default=None, alias="id", description="Depot identifier"),
    date: str | None = Query(default=None, description="Reading date (YYYY-MM-DD)"),
    config: Settings = Depends(get_settings),
) -> DepotLevelModel:
    return _depot_level(depot_id, date, config, response)


@router.post("/level", response_model=DepotLevelModel, status_code=status.HTTP_200_OK)
def post_depot_level(
    response: Response,
    payload: DepotLevelRequest | None = Body(default=None),
    config: Settings = Depends(get_settings),
) -> DepotLevelModel:
    payload = payload or DepotLevelRequest()
    return _depot_level(payload.id, payload.fecha, config, response)


@router.get("/status", response_model=DepotListResponse, status_code=status.HTTP_200_OK)
def get_depot_status(
    response: Response,
    date: str | None = Query(default=None, description="Reading date, defaults to today"),
    config: Settings = Depends(get_settings),
) -> DepotListResponse:
    client = GasogesClient(config)
    depots = collect_depot_status(client, config, date or date_type.today().isoformat())
    response.headers["Cache-Control"] = NO_CACHE
    return DepotListResponse(data=[DepotModel.from_domain(depot) for depot in depots])


@router.get("/low-level", response_model=LowLevelResponse, status_code=status.HTTP_200_OK)
def get_low_level_depots(
    response: Response,
    date: str | None = Query(default=None, description="Reading date, defaults to today"),
    threshold: float | None = Query(default=None, ge=0, description="Low level threshold in liters"),
    critical: float | None = Query(default=None, ge=0, description="Critical level threshold in liters"),
    config: Settings = Depends(get_settings),
) -> LowLevelResponse:
    threshold = config.low_level_threshold if threshold is None else threshold
    critical = config.critical_level_threshold if critical is None else critical
    client = GasogesClient(config)
    depots = collect_depot_status(client, config, date or date_type.today().isoformat())
    response.headers["Cache-Control"] = NO_CACHE
    return LowLevelResponse.from_report(split_low_level(depots, threshold, critical), threshold, critical)


@router.get("/{depot_id}/supplies", response_model=SupplyListResponse, status_code=status.HTTP_200_OK)
def list_depot_supplies(
    response: Response,
    depot_id: str = Path(..., description="Depot identifier"),
    start: str | None = Query(default=None, description="First day (YYYY-MM-DD)"),
    end: str | None = Query(default=None, description="Last day (YYYY-MM-DD)"),
    config: Settings = Depends(get_settings),
) -> SupplyListResponse:
    _require_range(start, end)
    client = GasogesClient(config)
    supplies = fetch_depot_supplies(client, depot_id, start, end)
    response.headers["Cache-Control"] = SHARED_FIVE_MINUTES
    return SupplyListResponse(data=[SupplyModel.from_domain(item) for item in supplies])


@router.get("/{depot_id}/state", response_model=EstimatedStateModel, status_code=status.HTTP_200_OK)
def get_estimated_state(
    depot_id: str = Path(..., description="Depot identifier"),
    start: str | None = Query(default=None, description="First day (YYYY-MM-DD)"),
    end: str | None = Query(default=None, description="Last day (YYYY-MM-DD)"),
    config: Settings = Depends(get_settings),
) -> EstimatedStateModel:
    """Estimate stock from configured capacity/initial stock minus the period's consumption."""
    _require_range(start, end)
    client = GasogesClient(config)
    supplies = fetch_depot_supplies(client, depot_id, start, end)
    return EstimatedStateModel.from_state(depot_id, estimate_state(config, depot_id, supplies))
