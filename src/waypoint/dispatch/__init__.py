"""Dispatch — ordered key → handler registries with fallback strategies.

Handlers are registered during setup; dispatch strategies (single key,
first match, broadcast, pipeline) are safe to call concurrently afterwards.
"""

from waypoint.dispatch.dispatcher import ALL, Dispatcher, first_successful
from waypoint.dispatch.handle import DispatchHandle
from waypoint.dispatch.keys import AUTO, Computed, DefaultMode, DefaultPolicy

__all__ = [
    "ALL",
    "AUTO",
    "Computed",
    "DefaultMode",
    "DefaultPolicy",
    "DispatchHandle",
    "Dispatcher",
    "first_successful",
]
