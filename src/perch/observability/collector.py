"""Mount collector — records what a registration pass did.

The resolver and binder report through a collector rather than printing
directly.  Informational events go to the ``EventLog``; warnings are also
echoed to stderr so they are visible during startup.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.

"""

import sys

from perch.observability.events import (
    ApiDirMissing,
    ApiMounted,
    NestingTooDeep,
    RouteRegistered,
    now_ns,
)
from perch.observability.log import EventLog


class MountCollector:
    """Event collector for the convention resolver and route binder.

    Args:
        log: The EventLog to store events in.
        echo: Print warnings to stderr as they are recorded.

    """

    __slots__ = ("_echo", "_log")

    def __init__(self, log: EventLog | None = None, *, echo: bool = True) -> None:
        self._log = log if log is not None else EventLog()
        self._echo = echo

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_mount(self, prefix: str, api_dir: str) -> None:
        """Record the start of a registration pass."""
        self._log.append(ApiMounted(prefix=prefix, api_dir=api_dir, timestamp_ns=now_ns()))

    def record_missing_dir(self, candidates: tuple[str, ...]) -> None:
        """Record that no api directory was found."""
        self._log.append(ApiDirMissing(candidates=candidates, timestamp_ns=now_ns()))
        self._warn(f"no api directory found (tried {', '.join(candidates)})")

    def record_nesting_too_deep(self, path: str, depth: int) -> None:
        """Record an over-deep directory that was skipped."""
        self._log.append(NestingTooDeep(path=path, depth=depth, timestamp_ns=now_ns()))
        self._warn(
            f"for directory {path!r}, the nesting is too deep ({depth} layers); "
            "at most /parents/:parent_id/children/:child_id/objects/:id is supported"
        )

    def record_route(
        self,
        method: str,
        url: str,
        *,
        resource: str,
        key: str,
        source: str,
    ) -> None:
        """Record a route handed to the router."""
        self._log.append(
            RouteRegistered(
                method=method,
                url=url,
                resource=resource,
                key=key,
                source=source,
                timestamp_ns=now_ns(),
            )
        )

    def warnings(self) -> list[str]:
        """Human-readable summaries of recorded warning events."""
        messages: list[str] = []
        for event in self._log.query(event_type=NestingTooDeep, limit=self._log_size()):
            messages.append(f"nesting too deep, skipped {event.path}")
        for event in self._log.query(event_type=ApiDirMissing, limit=self._log_size()):
            messages.append(f"no api directory ({', '.join(event.candidates)})")
        return messages

    def _log_size(self) -> int:
        return max(len(self._log), 1)

    def _warn(self, message: str) -> None:
        if self._echo:
            print(f"  [perch] warning: {message}", file=sys.stderr)
