"""Domain records produced by the response normalizers."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True, slots=True)
class Depot:
    """Snapshot of a fuel tank as reported by the telemetry API."""

    depot_id: int
    name: str
    capacity: Optional[float] = None
    current_liters: Optional[float] = None
    percentage: Optional[float] = None
    last_supply: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Supply:
    """A single fuel-dispensing transaction recorded by a pump."""

    user_id: Optional[int]
    vehicle_id: Optional[int]
    km: Optional[float]
    liters: float
    price: Optional[float]
    timestamp: str
    pump_serial: Optional[Union[str, int]]
    depot_id: Optional[int]
    fuel_id: Optional[int]


@dataclass(frozen=True, slots=True)
class Call:
    status: str
    started_at: Optional[datetime]
    answered_at: Optional[datetime]
    ended_at: Optional[datetime]
    agent: Optional[str]


@dataclass(frozen=True, slots=True)
class FlowAssignment:
    """Outcome of assigning a routing flow to one PBX line."""

    pbx_id: str
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Contact:
    contact_id: str
    first_name: str
    last_name: str
    phone: str
