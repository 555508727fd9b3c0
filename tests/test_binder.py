"""Tests for perch.routes.binder — method/URL derivation and registration."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from perch._errors import ConfigError, RouteConflictError
from perch.config import RestConfig
from perch.observability import MountCollector, RouteRegistered
from perch.routes.binder import (
    ROUTE_SPECS,
    ChirpRouteTarget,
    RegisteredRoute,
    bind,
    route_name,
)
from perch.routes.modules import HandlerModule, MethodKey, to_async
from perch.routes.paths import UrlPath


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class RecordingTarget:
    """RouteTarget that records registrations in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str, Any]] = []

    def register_route(self, method: str, name: str, path: UrlPath, handler: Any) -> None:
        self.calls.append((method, name, path.render(), handler))


class FakeApp:
    """Stand-in for chirp's App.route decorator API."""

    def __init__(self) -> None:
        self.routes: list[tuple[str, list[str] | None, str | None, Any]] = []

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Any], Any]:
        def decorator(func: Any) -> Any:
            self.routes.append((path, methods, name, func))
            return func

        return decorator


def _module(*keys: MethodKey, rules: dict[MethodKey, Any] | None = None) -> HandlerModule:
    async def handler(*args: Any) -> Any:
        return args

    return HandlerModule(
        source=Path("widgets.py"),
        handlers={key: handler for key in keys},
        rules=rules or {},
    )


def _passthrough(
    config: RestConfig,
    key: MethodKey,
    resource: str,
    handler: Any,
    rule: Any,
    path: UrlPath,
) -> Any:
    return ("endpoint", key, resource, handler, rule, path)


def _bind(
    target: Any,
    module: HandlerModule,
    *,
    prefix: str = "",
    resource: str = "widgets",
    collector: MountCollector | None = None,
) -> list[RegisteredRoute]:
    return bind(
        target,
        UrlPath.parse(prefix),
        resource,
        module,
        config=RestConfig(root=Path("/srv")),
        endpoint_factory=_passthrough,
        collector=collector,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


class TestRouteSpecs:
    def test_exactly_five_keys(self) -> None:
        assert set(ROUTE_SPECS) == set(MethodKey)
        assert len(ROUTE_SPECS) == 5

    @pytest.mark.parametrize(
        ("key", "method", "url"),
        [
            (MethodKey.INDEX, "GET", "/widgets"),
            (MethodKey.SHOW, "GET", "/widgets/:id"),
            (MethodKey.CREATE, "POST", "/widgets"),
            (MethodKey.UPDATE, "PUT", "/widgets/:id"),
            (MethodKey.DESTROY, "DELETE", "/widgets/:id"),
        ],
    )
    def test_catalog(self, key: MethodKey, method: str, url: str) -> None:
        spec = ROUTE_SPECS[key]
        assert spec.method == method
        assert spec.url(UrlPath(), "widgets").render() == url

    def test_route_name(self) -> None:
        assert route_name("GET", UrlPath.parse("/api/widgets/:id")) == "GET:/api/widgets/:id"


# ---------------------------------------------------------------------------
# bind
# ---------------------------------------------------------------------------


class TestBind:
    def test_index_and_show_only(self) -> None:
        target = RecordingTarget()
        routes = _bind(target, _module(MethodKey.INDEX, MethodKey.SHOW))

        assert [(m, p) for m, _, p, _ in target.calls] == [
            ("GET", "/widgets"),
            ("GET", "/widgets/:id"),
        ]
        assert [r.name for r in routes] == ["GET:/widgets", "GET:/widgets/:id"]

    def test_all_five(self) -> None:
        target = RecordingTarget()
        routes = _bind(target, _module(*MethodKey), prefix="/api")
        assert [(r.method, r.url) for r in routes] == [
            ("GET", "/api/widgets"),
            ("GET", "/api/widgets/:id"),
            ("POST", "/api/widgets"),
            ("PUT", "/api/widgets/:id"),
            ("DELETE", "/api/widgets/:id"),
        ]

    def test_nested_prefix(self) -> None:
        target = RecordingTarget()
        routes = _bind(target, _module(MethodKey.CREATE), prefix="/parents/:parent_id")
        assert len(routes) == 1
        assert routes[0].method == "POST"
        assert routes[0].url == "/parents/:parent_id/widgets"

    def test_empty_module_registers_nothing(self) -> None:
        target = RecordingTarget()
        assert _bind(target, _module()) == []
        assert target.calls == []

    def test_endpoint_factory_receives_rule_and_handler(self) -> None:
        rule = {"name": []}
        module = _module(MethodKey.CREATE, rules={MethodKey.CREATE: rule})
        target = RecordingTarget()
        [route] = _bind(target, module)

        tag, key, resource, handler, passed_rule, path = route.handler
        assert tag == "endpoint"
        assert key is MethodKey.CREATE
        assert resource == "widgets"
        assert handler is module.handlers[MethodKey.CREATE]
        assert passed_rule is rule
        assert path == route.path
        assert target.calls[0][3] is route.handler

    def test_missing_rule_passes_none(self) -> None:
        target = RecordingTarget()
        [route] = _bind(target, _module(MethodKey.SHOW))
        assert route.handler[4] is None

    def test_records_events(self, collector: MountCollector) -> None:
        _bind(RecordingTarget(), _module(MethodKey.INDEX, MethodKey.DESTROY), collector=collector)
        events = collector.log.query(event_type=RouteRegistered)
        assert [(e.method, e.url, e.resource, e.key) for e in events] == [
            ("GET", "/widgets", "widgets", "index"),
            ("DELETE", "/widgets/:id", "widgets", "destroy"),
        ]
        assert events[0].source == "widgets.py"

    def test_registered_route_carries_metadata(self) -> None:
        [route] = _bind(RecordingTarget(), _module(MethodKey.UPDATE), resource="sites")
        assert route.key is MethodKey.UPDATE
        assert route.resource == "sites"
        assert route.source == Path("widgets.py")
        assert route.path.params == ("id",)

    def test_deterministic_names(self) -> None:
        first = [r.name for r in _bind(RecordingTarget(), _module(*MethodKey), prefix="/api")]
        second = [r.name for r in _bind(RecordingTarget(), _module(*MethodKey), prefix="/api")]
        assert first == second


# ---------------------------------------------------------------------------
# ChirpRouteTarget
# ---------------------------------------------------------------------------


class TestChirpRouteTarget:
    def test_registers_with_chirp_syntax(self) -> None:
        app = FakeApp()
        target = ChirpRouteTarget(app)  # type: ignore[arg-type]
        handler = to_async(lambda request: None)

        target.register_route(
            "PUT", "PUT:/sites/:parent_id/pages/:id",
            UrlPath.parse("/sites/:parent_id/pages/:id"), handler,
        )

        assert app.routes == [
            ("/sites/{parent_id}/pages/{id}", ["PUT"], "PUT:/sites/:parent_id/pages/:id", handler),
        ]
        assert target.names == frozenset({"PUT:/sites/:parent_id/pages/:id"})

    def test_duplicate_name_rejected(self) -> None:
        app = FakeApp()
        target = ChirpRouteTarget(app)  # type: ignore[arg-type]
        path = UrlPath.parse("/widgets")

        target.register_route("GET", "GET:/widgets", path, object())
        with pytest.raises(RouteConflictError, match="GET:/widgets"):
            target.register_route("GET", "GET:/widgets", path, object())

        assert len(app.routes) == 1

    def test_conflict_is_config_error(self) -> None:
        assert issubclass(RouteConflictError, ConfigError)

    def test_same_path_different_verbs_allowed(self) -> None:
        app = FakeApp()
        target = ChirpRouteTarget(app)  # type: ignore[arg-type]
        routes = _bind(target, _module(MethodKey.INDEX, MethodKey.CREATE))
        assert len(routes) == 2
        assert [r[1] for r in app.routes] == [["GET"], ["POST"]]
