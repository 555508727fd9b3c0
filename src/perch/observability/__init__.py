"""Mount observability — a structured record of each registration pass.

Quick Start:
    >>> from perch.observability import EventLog, MountCollector
    >>> log = EventLog()
    >>> collector = MountCollector(log)
    >>> # Pass collector to perch.app.mount(..., collector=collector)

"""

from perch.observability.collector import MountCollector
from perch.observability.events import (
    ApiDirMissing,
    ApiMounted,
    MountEvent,
    NestingTooDeep,
    RouteRegistered,
    now_ns,
)
from perch.observability.log import EventLog

__all__ = [
    "ApiDirMissing",
    "ApiMounted",
    "EventLog",
    "MountCollector",
    "MountEvent",
    "NestingTooDeep",
    "RouteRegistered",
    "now_ns",
]
