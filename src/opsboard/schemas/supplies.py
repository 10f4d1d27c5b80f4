"""Fuel supply API schemas."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import Supply
from ..services.kpis import SupplySummary


class SupplyModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  user_id: Optional[int] = Field(None, alias='ID_USUARIO')
  vehicle_id: Optional[int] = Field(None, alias='ID_VEHICULO')
  km: Optional[float] = Field(None, alias='KM')
  liters: float = Field(..., alias='LITROS_SUMINISTRADOS')
  price: Optional[float] = Field(None, alias='PRECIO')
  timestamp: str = Field(..., alias='FECHA Y HORA')
  pump_serial: Optional[Union[str, int]] = Field(None, alias='NUMERO_DE_SERIE_SURTIDOR')
  depot_id: Optional[int] = Field(None, alias='ID_DEPOSITO')
  fuel_id: Optional[int] = Field(None, alias='ID_COMBUSTIBLE')

  @classmethod
  def from_domain(cls, supply: Supply) -> "SupplyModel":
    return cls(
      user_id=supply.user_id,
      vehicle_id=supply.vehicle_id,
      km=supply.km,
      liters=supply.liters,
      price=supply.price,
      timestamp=supply.timestamp,
      pump_serial=supply.pump_serial,
      depot_id=supply.depot_id,
      fuel_id=supply.fuel_id,
    )


class SupplySummaryModel(BaseModel):
  total_liters: float
  operations: int
  average: float
  latest: List[SupplyModel]

  @classmethod
  def from_summary(cls, summary: SupplySummary) -> "SupplySummaryModel":
    return cls(
      total_liters=summary.total_liters,
      operations=summary.operations,
      average=summary.average,
      latest=[SupplyModel.from_domain(item) for item in summary.latest],
    )


class SupplyListResponse(BaseModel):
  data: List[SupplyModel]
  summary: Optional[SupplySummaryModel] = None
