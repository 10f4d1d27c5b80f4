"""Route group exports."""

from . import calls, depots, flows, health, phonebook, supplies

__all__ = ["depots", "supplies", "calls", "flows", "phonebook", "health"]
