"""Polling client for dashboard views."""

from .api import DashboardApi
from .queries import LowLevelView, PolledQuery, Poller, build_dashboard_queries

__all__ = ["DashboardApi", "PolledQuery", "Poller", "LowLevelView", "build_dashboard_queries"]
