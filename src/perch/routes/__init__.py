"""Convention-based REST route discovery.

Walks an api directory, maps file and folder names to URL paths, and binds
exported ``index``/``show``/``create``/``update``/``destroy`` handlers to
HTTP verbs.

Public API::

    from perch.routes import resolve, bind, ChirpRouteTarget

    for entry in resolve(api_dir, UrlPath.parse("/api")):
        bind(target, entry.prefix, entry.resource, entry.module, ...)
"""

from perch.routes.binder import (
    ROUTE_SPECS,
    ChirpRouteTarget,
    RegisteredRoute,
    RouteSpec,
    RouteTarget,
    bind,
    route_name,
)
from perch.routes.modules import (
    HandlerModule,
    MethodKey,
    load_handler_module,
    to_async,
)
from perch.routes.paths import Segment, UrlPath, normalize_prefix
from perch.routes.resolver import (
    DirectoryNode,
    NestingLevel,
    ResourceEntry,
    locate_api_dir,
    resolve,
)

__all__ = [
    "ROUTE_SPECS",
    "ChirpRouteTarget",
    "DirectoryNode",
    "HandlerModule",
    "MethodKey",
    "NestingLevel",
    "RegisteredRoute",
    "ResourceEntry",
    "RouteSpec",
    "RouteTarget",
    "Segment",
    "UrlPath",
    "bind",
    "load_handler_module",
    "locate_api_dir",
    "normalize_prefix",
    "resolve",
    "route_name",
    "to_async",
]
