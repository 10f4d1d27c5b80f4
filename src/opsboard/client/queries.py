"""Periodic polling with stale-time caching for dashboard views.

A query serves its cached value while it is fresh and refetches once it goes
stale. Failed fetches keep the last good value; the next interval is the retry.
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import date
from typing import Callable, Generic, Iterable, Literal, Optional, TypeVar

import httpx

from ..models.domain import Depot
from ..services.kpis import LowLevelReport, split_low_level
from .api import DashboardApi

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryStatus = Literal["idle", "success", "error"]

DEPOTS_REFETCH_SECONDS = 300.0
CALLS_REFETCH_SECONDS = 5.0
SUPPLIES_TODAY_REFETCH_SECONDS = 60.0
SUPPLIES_STALE_SECONDS = 30.0


class PolledQuery(Generic[T]):
    def __init__(
        self,
        key: str,
        fetch: Callable[[], T],
        refetch_interval: Optional[float],
        stale_time: Optional[float] = None,
        initial: Optional[T] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.key = key
        self.fetch = fetch
        self.refetch_interval = refetch_interval
        if stale_time is None:
            stale_time = refetch_interval * 0.5 if refetch_interval else SUPPLIES_STALE_SECONDS
        self.stale_time = stale_time
        self.clock = clock
        self.data: Optional[T] = initial
        self.error: Optional[Exception] = None
        self.status: QueryStatus = "idle"
        self.updated_at: Optional[float] = None
        self.attempted_at: Optional[float] = None

    def is_stale(self, now: Optional[float] = None) -> bool:
        if self.updated_at is None:
            return True
        now = self.clock() if now is None else now
        return now - self.updated_at >= self.stale_time

    def due(self, now: Optional[float] = None) -> bool:
        """Whether the polling interval has elapsed since the last attempt."""
        if self.refetch_interval is None:
            return self.attempted_at is None
        if self.attempted_at is None:
            return True
        now = self.clock() if now is None else now
        return now - self.attempted_at >= self.refetch_interval

    def refresh(self) -> Optional[T]:
        self.attempted_at = self.clock()
        try:
            self.data = self.fetch()
        except (httpx.HTTPError, ValueError) as exc:
            self.error = exc
            self.status = "error"
            logger.warning(f"Query {self.key} failed, keeping previous data: {exc}")
        else:
            self.error = None
            self.status = "success"
            self.updated_at = self.attempted_at
        return self.data

    def get(self) -> Optional[T]:
        if self.is_stale():
            return self.refresh()
        return self.data


class Poller:
    """Refreshes every due query on a fixed cadence until stopped."""

    def __init__(self, queries: Iterable[PolledQuery], tick_seconds: float = 1.0) -> None:
        self.queries = list(queries)
        self.tick_seconds = tick_seconds

    def tick(self) -> list[str]:
        refreshed = []
        for query in self.queries:
            if query.due():
                query.refresh()
                refreshed.append(query.key)
        return refreshed

    def run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            self.tick()
            stop_event.wait(self.tick_seconds)

    def start(self) -> tuple[threading.Thread, threading.Event]:
        stop_event = threading.Event()
        thread = threading.Thread(target=self.run, args=(stop_event,), name="dashboard-poller", daemon=True)
        thread.start()
        return thread, stop_event


class LowLevelView:
    """Depots below the alert threshold, derived from a depot status query."""

    def __init__(self, depots: PolledQuery[list[Depot]], threshold: float = 400, critical_threshold: float = 200) -> None:
        self.depots = depots
        self.threshold = threshold
        self.critical_threshold = critical_threshold

    def report(self) -> LowLevelReport:
        return split_low_level(self.depots.data or [], self.threshold, self.critical_threshold)


def build_dashboard_queries(
    api: DashboardApi,
    day: Optional[date] = None,
    today: Optional[date] = None,
    clock: Callable[[], float] = time.monotonic,
) -> dict[str, PolledQuery]:
    """Standard dashboard queries; past days' supplies are fetched once, never polled."""
    today = today or date.today()
    day = day or today
    day_str = day.isoformat()
    return {
        "depots": PolledQuery(
            "depots", api.depot_status, DEPOTS_REFETCH_SECONDS, initial=[], clock=clock
        ),
        "calls": PolledQuery(
            "calls",
            api.call_kpis,
            CALLS_REFETCH_SECONDS,
            initial={"waiting_now": 0, "answered_today": 0, "agents_online": 0},
            clock=clock,
        ),
        "supplies": PolledQuery(
            "supplies",
            lambda: api.supplies(day_str, day_str),
            SUPPLIES_TODAY_REFETCH_SECONDS if day == today else None,
            stale_time=SUPPLIES_STALE_SECONDS,
            initial=[],
            clock=clock,
        ),
    }
