"""Perch configuration.

RestConfig is the central configuration object, frozen after creation.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from perch.routes.modules import to_async
from perch.routes.paths import UrlPath, normalize_prefix


@dataclass(frozen=True, slots=True)
class RestConfig:
    """Configuration for mounting a REST api tree.

    Attributes:
        root: Application base directory.  Always resolved to an absolute
              path on construction.
        url_prefix: URL prefix every route hangs off.  Normalized once on
            construction (``"/api/"`` -> ``"/api"``, ``"/"`` -> ``""``).
        api_dir: Handler directory, relative to *root*.
        legacy_api_dir: Fallback handler directory, probed when *api_dir*
            does not exist.
        auth_request: Optional callable receiving the request, wrapped as
            ``async`` on construction; a falsy result rejects the request
            with 401.  Config files give it as ``"module:attr"``, resolved
            by ``perch.config_loader``.
        host: Bind address for ``perch serve``.
        port: Bind port for ``perch serve``.
        debug: Run chirp in debug mode.

    """

    root: Path = field(default_factory=Path.cwd)
    url_prefix: str = "/api"
    api_dir: str = "app/api"
    legacy_api_dir: str = "app/apis"
    auth_request: Callable[..., Any] | None = None
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        object.__setattr__(self, "url_prefix", normalize_prefix(self.url_prefix))
        if self.auth_request is not None:
            object.__setattr__(self, "auth_request", to_async(self.auth_request))

    @property
    def prefix_path(self) -> UrlPath:
        """The normalized prefix as structured segments."""
        return UrlPath.parse(self.url_prefix)

    @property
    def api_path(self) -> Path:
        """Absolute path to the canonical api directory."""
        return self.root / self.api_dir

    @property
    def legacy_api_path(self) -> Path:
        """Absolute path to the legacy api directory."""
        return self.root / self.legacy_api_dir
