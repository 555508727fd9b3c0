"""Mount events — a structured record of one registration pass.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Mount lifecycle
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ApiMounted:
    """The api tree was located and a registration pass started.

    Attributes:
        prefix: Normalized URL prefix.
        api_dir: Absolute path of the api directory being walked.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    prefix: str
    api_dir: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ApiDirMissing:
    """Neither the canonical nor the legacy api directory exists.

    Attributes:
        candidates: The directories that were probed, in order.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    candidates: tuple[str, ...]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Resolution and binding
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NestingTooDeep:
    """A directory below the second nesting level was skipped.

    Attributes:
        path: Absolute path of the skipped directory.
        depth: Nesting depth the directory would have introduced.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    depth: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class RouteRegistered:
    """A route was handed to the router.

    Attributes:
        method: Upper-case HTTP verb.
        url: URL template with ``:name`` parameters.
        resource: Resource name the route belongs to.
        key: Handler method key (``index``, ``show``, ...).
        source: Handler module the route was bound from.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    method: str
    url: str
    resource: str
    key: str
    source: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type MountEvent = ApiMounted | ApiDirMissing | NestingTooDeep | RouteRegistered


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
