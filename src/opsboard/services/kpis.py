"""Dashboard KPI reductions over normalized records."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..models.domain import Call, Depot, Supply

ANSWERED_STATUS = "1"


@dataclass(frozen=True, slots=True)
class CallKpis:
    waiting_now: int
    answered_today: int
    agents_online: int


@dataclass(frozen=True, slots=True)
class LowLevelReport:
    below: list[Depot] = field(default_factory=list)
    critical: list[Depot] = field(default_factory=list)

    @property
    def has_low_level(self) -> bool:
        return bool(self.below)


@dataclass(frozen=True, slots=True)
class SupplySummary:
    total_liters: float
    operations: int
    average: float
    latest: list[Supply]


@dataclass(frozen=True, slots=True)
class EstimatedState:
    capacity: Optional[float]
    initial_stock: Optional[float]
    entries: float
    consumption: float
    estimated_stock: Optional[float]
    percentage: Optional[int]


def compute_call_kpis(
    calls: Iterable[Call],
    now: datetime,
    window_seconds: int = 60,
    agent_active_minutes: int = 10,
) -> CallKpis:
    """Count waiting and answered calls plus distinct agents recently answering.

    A call is waiting when it started inside the recent window and has neither
    been answered nor ended.
    """
    recent_cutoff = now - timedelta(seconds=window_seconds)
    agent_cutoff = now - timedelta(minutes=agent_active_minutes)

    waiting = 0
    answered = 0
    agents: set[str] = set()
    for call in calls:
        if call.status == ANSWERED_STATUS:
            answered += 1
            if call.answered_at and call.answered_at >= agent_cutoff and call.agent:
                agents.add(call.agent)
        if (
            call.started_at
            and call.answered_at is None
            and call.ended_at is None
            and call.started_at >= recent_cutoff
        ):
            waiting += 1
    return CallKpis(waiting_now=waiting, answered_today=answered, agents_online=len(agents))


def split_low_level(depots: Iterable[Depot], threshold: float = 400, critical_threshold: float = 200) -> LowLevelReport:
    """Depots with a known level under ``threshold`` and the stricter critical subset."""
    below = [
        depot
        for depot in depots
        if depot.current_liters is not None and depot.current_liters < threshold
    ]
    critical = [depot for depot in below if depot.current_liters < critical_threshold]
    return LowLevelReport(below=below, critical=critical)


def _newest_first_key(supply: Supply) -> tuple:
    return (supply.timestamp, supply.liters, str(supply.vehicle_id), str(supply.pump_serial))


def sort_newest_first(supplies: Iterable[Supply]) -> list[Supply]:
    return sorted(supplies, key=_newest_first_key, reverse=True)


def summarize_supplies(supplies: Sequence[Supply], latest: int = 5) -> SupplySummary:
    total = math.fsum(supply.liters for supply in supplies)
    operations = len(supplies)
    average = round(total / operations, 2) if operations else 0.0
    return SupplySummary(
        total_liters=total,
        operations=operations,
        average=average,
        latest=sort_newest_first(supplies)[:latest],
    )


def estimate_depot_state(
    capacity: Optional[float],
    initial_stock: Optional[float],
    entries: Optional[float],
    consumption: float,
) -> EstimatedState:
    entries = entries or 0.0
    if capacity is None and initial_stock is None:
        return EstimatedState(capacity, initial_stock, entries, consumption, None, None)

    estimated = (initial_stock or 0.0) + entries - consumption
    if capacity is not None:
        estimated = max(0.0, min(capacity, estimated))
    percentage = round(estimated / capacity * 100) if capacity else None
    return EstimatedState(capacity, initial_stock, entries, consumption, estimated, percentage)


def with_percentage(depot: Depot, capacity: Optional[float]) -> Depot:
    """Fill capacity and percentage from configuration when the API omits them."""
    capacity = depot.capacity if depot.capacity is not None else capacity
    percentage = depot.percentage
    if percentage is None and capacity and depot.current_liters is not None:
        percentage = round(depot.current_liters / capacity * 100)
    return replace(depot, capacity=capacity, percentage=percentage)
