"""Startup banner and route table — status output on stderr.

Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perch.config import RestConfig
    from perch.routes.binder import RegisteredRoute


# ---------------------------------------------------------------------------
# ANSI helpers, respecting NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_MAGENTA = "\033[35m" if _COLOR else ""
_RED = "\033[31m" if _COLOR else ""


# ---------------------------------------------------------------------------
# Verb colors
# ---------------------------------------------------------------------------

_METHOD_COLORS: dict[str, str] = {
    "GET": _GREEN,
    "POST": _YELLOW,
    "PUT": _CYAN,
    "DELETE": _RED,
}


def _method_label(method: str) -> str:
    """Return a colored, padded HTTP verb."""
    color = _METHOD_COLORS.get(method, _DIM)
    return f"{color}{method:<6}{_RESET}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def format_route_table(routes: Sequence[RegisteredRoute]) -> list[str]:
    """Format routes as aligned ``VERB  url  => resource.key()`` lines."""
    if not routes:
        return [f"  {_DIM}(no routes){_RESET}"]
    width = max(len(r.url) for r in routes)
    return [
        f"  {_method_label(r.method)} {r.url:<{width}}  "
        f"{_DIM}=> {r.resource}.{r.key.value}(){_RESET}"
        for r in routes
    ]


def print_route_table(
    routes: Sequence[RegisteredRoute],
    *,
    warnings: list[str] | None = None,
) -> None:
    """Print the route table to stderr."""
    lines = format_route_table(routes)
    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)
    print("\n".join(lines), file=sys.stderr)


def print_banner(
    config: RestConfig,
    routes: Sequence[RegisteredRoute],
    mode: str,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the Perch startup banner to stderr.

    Args:
        config: Resolved RestConfig.
        routes: Routes registered by the mount pass.
        mode: Label shown in the header badge (e.g. ``"serve"``).
        load_ms: Time spent mounting in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from perch import __version__

    header = (
        f"  {_MAGENTA}{_BOLD}perch{_RESET} {_DIM}v{__version__}{_RESET}  "
        f"{_CYAN}[{mode}]{_RESET}"
    )

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    routes_label = "route" if len(routes) == 1 else "routes"
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {len(routes)} {routes_label} mounted{timing}")
    lines.append(f"  {_DIM}├─{_RESET} prefix: {config.url_prefix or '/'}")
    lines.append(f"  {_DIM}└─{_RESET} api: {_DIM}{config.api_path}{_RESET}")

    url = f"http://{config.host}:{config.port}"
    lines.append("")
    lines.append(f"  {_BOLD}{url}{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
