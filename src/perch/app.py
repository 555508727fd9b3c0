"""Perch application — mount a convention-based REST api on a chirp App.

``mount()`` is the whole registration pass: locate the api directory, walk
it, and bind every handler module's routes.  ``create_app()`` and
``serve()`` wrap it for standalone use.
"""

import time
from pathlib import Path
from typing import TYPE_CHECKING

from perch.api import make_endpoint
from perch.config import RestConfig
from perch.config_loader import load_config
from perch.observability import MountCollector
from perch.routes.binder import ChirpRouteTarget, RegisteredRoute, RouteTarget, bind
from perch.routes.resolver import locate_api_dir, resolve

if TYPE_CHECKING:
    from chirp import App


def mount(
    app: App,
    config: RestConfig,
    *,
    context: object = None,
    collector: MountCollector | None = None,
    target: RouteTarget | None = None,
) -> tuple[RegisteredRoute, ...]:
    """Discover handler modules under the api directory and register routes.

    Probes ``config.api_path`` then ``config.legacy_api_path``.  When neither
    exists, nothing is registered and an ``ApiDirMissing`` event is recorded.

    Args:
        app: The chirp application receiving the routes.
        config: Resolved RestConfig.
        context: Passed to handler module ``setup()`` factories.  Defaults
            to *app*.
        collector: Receives mount, route, and warning events.
        target: Registration target.  Defaults to a ``ChirpRouteTarget``
            for *app*.

    Returns:
        Every route registered, in walk order.

    Raises:
        ModuleLoadError: A handler module failed to load.
        RouteConflictError: Two modules produced the same route name.

    """
    if collector is None:
        collector = MountCollector()
    if target is None:
        target = ChirpRouteTarget(app)
    if context is None:
        context = app

    api_dir = locate_api_dir(config.root, config.api_dir, config.legacy_api_dir)
    if api_dir is None:
        collector.record_missing_dir((str(config.api_path), str(config.legacy_api_path)))
        return ()

    collector.record_mount(config.url_prefix, str(api_dir))

    routes: list[RegisteredRoute] = []
    for entry in resolve(api_dir, config.prefix_path, context=context, collector=collector):
        routes.extend(
            bind(
                target,
                entry.prefix,
                entry.resource,
                entry.module,
                config=config,
                endpoint_factory=make_endpoint,
                collector=collector,
            )
        )
    return tuple(routes)


def create_app(
    config: RestConfig,
    *,
    collector: MountCollector | None = None,
) -> tuple[App, tuple[RegisteredRoute, ...]]:
    """Create a chirp App with the api tree mounted."""
    from chirp import App, AppConfig

    app = App(config=AppConfig(host=config.host, port=config.port, debug=config.debug))
    routes = mount(app, config, collector=collector)
    return app, routes


def collect_routes(
    root: str | Path = ".",
    **overrides: object,
) -> tuple[tuple[RegisteredRoute, ...], MountCollector]:
    """Resolve and bind the api tree under *root* without serving it.

    Warnings are collected rather than echoed so callers can present them.
    """
    config = load_config(Path(root), **overrides)
    collector = MountCollector(echo=False)
    _, routes = create_app(config, collector=collector)
    return routes, collector


def serve(
    root: str | Path = ".",
    *,
    host: str | None = None,
    port: int | None = None,
    debug: bool | None = None,
) -> None:
    """Mount the api tree under *root* and run chirp's server.

    Args:
        root: Application base directory.
        host: Bind address (overrides config).
        port: Bind port (overrides config).
        debug: Run in debug mode (overrides config).

    """
    from perch.banner import print_banner

    start = time.perf_counter()
    config = load_config(Path(root), host=host, port=port, debug=debug)
    collector = MountCollector(echo=False)
    app, routes = create_app(config, collector=collector)
    load_ms = (time.perf_counter() - start) * 1000

    print_banner(
        config,
        routes,
        mode="serve",
        load_ms=load_ms,
        warnings=collector.warnings(),
    )
    app.run(host=config.host, port=config.port)
