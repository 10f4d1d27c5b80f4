"""Depot status assembly on top of the Gasoges client."""

from __future__ import annotations

import logging
import math
from dataclasses import replace

from ..config import Settings
from ..errors import ProxyError
from ..models.domain import Depot, Supply
from .gasoges.client import GasogesClient
from .kpis import EstimatedState, estimate_depot_state, sort_newest_first, with_percentage
from .normalize import normalize_depots, normalize_supplies, parse_depot_level

logger = logging.getLogger(__name__)


def fetch_depot_level(client: GasogesClient, depot_id: int | str, date: str) -> float | None:
    return parse_depot_level(client.depot_level(depot_id, date))


def collect_depot_status(client: GasogesClient, config: Settings, date: str) -> list[Depot]:
    """List depots and attach the level of each one for ``date``.

    Levels are fetched one depot at a time. A failed level request leaves that
    depot's level unknown and does not affect the others.
    """
    depots = normalize_depots(client.list_depots())
    status: list[Depot] = []
    for depot in depots:
        try:
            level = fetch_depot_level(client, depot.depot_id, date)
        except ProxyError as exc:
            logger.warning(f"Level for depot {depot.depot_id} unavailable on {date}: {exc.message}")
            level = None
        if level is None:
            level = depot.current_liters
        capacity = config.depot_capacities.get(str(depot.depot_id))
        status.append(with_percentage(replace(depot, current_liters=level), capacity))
    logger.info(f"Collected status for {len(status)} depots on {date}")
    return status


def fetch_depot_supplies(client: GasogesClient, depot_id: int | str, start: str, end: str) -> list[Supply]:
    return sort_newest_first(normalize_supplies(client.depot_supplies(depot_id, start, end)))


def estimate_state(config: Settings, depot_id: int | str, supplies: list[Supply]) -> EstimatedState:
    key = str(depot_id)
    return estimate_depot_state(
        capacity=config.depot_capacities.get(key),
        initial_stock=config.depot_initial_stock.get(key),
        entries=config.depot_entries.get(key),
        consumption=math.fsum(supply.liters for supply in supplies),
    )
