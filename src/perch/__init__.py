"""Perch — convention-based REST routes for chirp.

Walks an api directory and registers RESTful routes, mapping file and folder
names to URL paths and exported handler functions to HTTP verbs::

    app/api/widgets.py        index, show      -> GET /api/widgets, GET /api/widgets/:id
    app/api/sites/pages.py    create           -> POST /api/sites/:parent_id/pages
    app/api/sites/index.py    index            -> GET /api/sites

Quick start::

    from pathlib import Path

    from chirp import App
    import perch

    app = App()
    perch.mount(app, perch.RestConfig(root=Path("."), url_prefix="/api"))

Or from the command line::

    perch routes .
    perch serve . --port 8000

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "RestConfig",
    "__version__",
    "create_app",
    "load_config",
    "mount",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast; chirp is only imported when needed.
    """
    if name == "RestConfig":
        from perch.config import RestConfig

        return RestConfig

    if name == "load_config":
        from perch.config_loader import load_config

        return load_config

    if name == "mount":
        from perch.app import mount

        return mount

    if name == "create_app":
        from perch.app import create_app

        return create_app

    if name == "serve":
        from perch.app import serve

        return serve

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
