"""Depot API schemas, keyed by the telemetry API's field names."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import Depot
from ..services.kpis import EstimatedState, LowLevelReport


class DepotModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  depot_id: int = Field(..., alias='ID_DEPOSITO')
  name: str = Field(..., alias='NOMBRE')
  capacity: Optional[float] = Field(None, alias='CAPACIDAD')
  current_liters: Optional[float] = Field(None, alias='LITROS_ACTUALES')
  percentage: Optional[float] = Field(None, alias='PORCENTAJE')
  last_supply: Optional[str] = Field(None, alias='ULTIMO_SUMINISTRO')

  @classmethod
  def from_domain(cls, depot: Depot) -> "DepotModel":
    return cls(
      depot_id=depot.depot_id,
      name=depot.name,
      capacity=depot.capacity,
      current_liters=depot.current_liters,
      percentage=depot.percentage,
      last_supply=depot.last_supply,
    )


class DepotListResponse(BaseModel):
  data: List[DepotModel]


class DepotLevelModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  depot_id: Union[int, str] = Field(..., alias='ID_DEPOSITO')
  date: str = Field(..., alias='FECHA')
  current_liters: Optional[float] = Field(None, alias='LITROS_ACTUALES')


class DepotLevelRequest(BaseModel):
  id: Optional[str | int] = None
  fecha: Optional[str] = None


class LowLevelResponse(BaseModel):
  data: List[DepotModel]
  critical: List[DepotModel]
  has_low_level: bool
  threshold: float
  critical_threshold: float

  @classmethod
  def from_report(cls, report: LowLevelReport, threshold: float, critical_threshold: float) -> "LowLevelResponse":
    return cls(
      data=[DepotModel.from_domain(depot) for depot in report.below],
      critical=[DepotModel.from_domain(depot) for depot in report.critical],
      has_low_level=report.has_low_level,
      threshold=threshold,
      critical_threshold=critical_threshold,
    )


class EstimatedStateModel(BaseModel):
  depot_id: str
  capacity: Optional[float] = None
  initial_stock: Optional[float] = None
  entries: float = 0.0
  consumption: float
  estimated_stock: Optional[float] = None
  percentage: Optional[int] = None

  @classmethod
  def from_state(cls, depot_id: str, state: EstimatedState) -> "EstimatedStateModel":
    return cls(
      depot_id=depot_id,
      capacity=state.capacity,
      initial_stock=state.initial_stock,
      entries=state.entries,
      consumption=state.consumption,
      estimated_stock=state.estimated_stock,
      percentage=state.percentage,
    )
