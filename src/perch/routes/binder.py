"""Route binder — turn a handler module into concrete routes.

Each canonical method key maps to a verb and a URL shape::

    index    GET     /{resource}
    show     GET     /{resource}/:id
    create   POST    /{resource}
    update   PUT     /{resource}/:id
    destroy  DELETE  /{resource}/:id

The route name ``<VERB>:<url>`` is the registration identity.  Routes are
handed to a ``RouteTarget``; ``ChirpRouteTarget`` registers them on a chirp
``App`` and rejects duplicate names.
"""

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from perch._errors import RouteConflictError
from perch._types import HandlerFunc, HttpMethod, RouteName
from perch.observability import MountCollector
from perch.routes.modules import HandlerModule, MethodKey
from perch.routes.paths import Segment, UrlPath

if TYPE_CHECKING:
    from chirp import App

    from perch.config import RestConfig

# Member routes address a single object by this parameter
ID_PARAM = "id"


@dataclass(frozen=True, slots=True)
class RouteSpec:
    """Verb and URL shape for one method key.

    Attributes:
        method: Upper-case HTTP verb.
        member: True for ``/{resource}/:id``, False for ``/{resource}``.

    """

    method: HttpMethod
    member: bool

    def url(self, prefix: UrlPath, resource: str) -> UrlPath:
        path = prefix.child(Segment(resource))
        if self.member:
            return path.child(Segment.param(ID_PARAM))
        return path


ROUTE_SPECS: dict[MethodKey, RouteSpec] = {
    MethodKey.INDEX: RouteSpec("GET", member=False),
    MethodKey.SHOW: RouteSpec("GET", member=True),
    MethodKey.CREATE: RouteSpec("POST", member=False),
    MethodKey.UPDATE: RouteSpec("PUT", member=True),
    MethodKey.DESTROY: RouteSpec("DELETE", member=True),
}


@dataclass(frozen=True, slots=True)
class RegisteredRoute:
    """A route handed to the router.

    Attributes:
        method: Upper-case HTTP verb.
        path: Structured URL template.
        name: Registration identity, ``<VERB>:<url>``.
        resource: Resource name the route serves.
        key: Method key the handler was exported under.
        handler: The bound request handler given to the router.
        source: Handler module the route came from.

    """

    method: HttpMethod
    path: UrlPath
    name: RouteName
    resource: str
    key: MethodKey
    handler: HandlerFunc
    source: Path

    @property
    def url(self) -> str:
        """URL template with ``:name`` parameters."""
        return self.path.render()


class RouteTarget(Protocol):
    """Anything that accepts route registrations."""

    def register_route(
        self,
        method: HttpMethod,
        name: RouteName,
        path: UrlPath,
        handler: HandlerFunc,
    ) -> None: ...


class ChirpRouteTarget:
    """Register routes on a chirp ``App``.

    Conflict policy: the first registration of a route name wins and any
    later one raises ``RouteConflictError``.

    """

    __slots__ = ("_app", "_names")

    def __init__(self, app: App) -> None:
        self._app = app
        self._names: set[RouteName] = set()

    @property
    def names(self) -> frozenset[RouteName]:
        return frozenset(self._names)

    def register_route(
        self,
        method: HttpMethod,
        name: RouteName,
        path: UrlPath,
        handler: HandlerFunc,
    ) -> None:
        if name in self._names:
            msg = f"Duplicate route {name!r}: already registered by another handler module"
            raise RouteConflictError(msg)
        self._app.route(path.chirp_path(), methods=[method], name=name)(handler)
        self._names.add(name)


type EndpointFactory = Callable[
    [RestConfig, MethodKey, str, HandlerFunc, Any, UrlPath], HandlerFunc
]


def route_name(method: HttpMethod, path: UrlPath) -> RouteName:
    return f"{method}:{path.render()}"


def bind(
    target: RouteTarget,
    prefix: UrlPath,
    resource: str,
    module: HandlerModule,
    *,
    config: RestConfig,
    endpoint_factory: EndpointFactory,
    collector: MountCollector | None = None,
) -> list[RegisteredRoute]:
    """Register 0-5 routes for *module* on *target*.

    Args:
        target: Receives each registration.
        prefix: URL prefix for the resource.
        resource: Resource name substituted for ``{resource}``.
        module: Loaded handler module.
        config: Passed through to *endpoint_factory*.
        endpoint_factory: Builds the request handler from
            ``(config, key, resource, handler, rule, path)``.
        collector: Receives a ``RouteRegistered`` event per route.

    Returns:
        The routes registered, in method-key order.

    """
    routes: list[RegisteredRoute] = []

    for key, spec in ROUTE_SPECS.items():
        handler = module.handler(key)
        if handler is None:
            continue

        path = spec.url(prefix, resource)
        name = route_name(spec.method, path)
        endpoint = endpoint_factory(config, key, resource, handler, module.rule(key), path)

        target.register_route(spec.method, name, path, endpoint)
        route = RegisteredRoute(
            method=spec.method,
            path=path,
            name=name,
            resource=resource,
            key=key,
            handler=endpoint,
            source=module.source,
        )
        routes.append(route)

        if collector is not None:
            collector.record_route(
                spec.method,
                route.url,
                resource=resource,
                key=key.value,
                source=str(module.source),
            )

    return routes
