"""Handler modules — load a Python file into a typed handler map.

A handler module is any ``.py`` file in the api tree.  Its exported
functions are matched against a closed set of method keys::

    # app/api/widgets.py
    async def index(request, params): ...
    def show(request, id, params): ...          # sync is fine too
    create_rule = {"name": [required]}          # companion validator

``<key>_rule`` and ``<key>Rule`` are both accepted for validators.

Factory convention — a module that needs late-bound context defines
``setup(app)`` and returns the handler map (a mapping or any object with
attributes)::

    def setup(app):
        store = app.store
        async def index(request, params):
            return await store.all()
        return {"index": index}

Every handler is normalized to an ``async`` callable once, at load time.
"""

import functools
import importlib.util
import inspect
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

from perch._errors import ModuleLoadError
from perch._types import HandlerFunc

# Source files recognised as handler modules
SOURCE_SUFFIX = ".py"

# Module-level factory invoked with the application context
FACTORY_NAME = "setup"

# Namespace for synthetic module names in sys.modules
_MODULE_NAMESPACE = "perch_api"


class MethodKey(StrEnum):
    """The handler export names that produce routes."""

    INDEX = "index"
    SHOW = "show"
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"


@dataclass(frozen=True, slots=True)
class HandlerModule:
    """Handlers and validation rules loaded from one source file.

    Attributes:
        source: Filesystem path of the module.
        handlers: Method key -> async-normalized handler.
        rules: Method key -> companion validation rule, when exported.

    """

    source: Path
    handlers: dict[MethodKey, HandlerFunc] = field(default_factory=dict)
    rules: dict[MethodKey, Any] = field(default_factory=dict)

    def handler(self, key: MethodKey) -> HandlerFunc | None:
        return self.handlers.get(key)

    def rule(self, key: MethodKey) -> Any:
        return self.rules.get(key)


def to_async(func: HandlerFunc) -> HandlerFunc:
    """Return an ``async`` callable equivalent to *func*.

    Coroutine functions are returned unchanged.  Anything else is wrapped so
    that awaiting the wrapper calls *func* and awaits its result if that
    result is itself awaitable.
    """
    if inspect.iscoroutinefunction(func):
        return func

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        result = func(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result
        return result

    return wrapper


def is_source_file(path: Path) -> bool:
    """True for ``.py`` files that are not private (``_`` prefixed)."""
    return path.suffix == SOURCE_SUFFIX and not path.name.startswith("_")


def load_handler_module(
    py_file: Path,
    api_dir: Path,
    context: object = None,
) -> HandlerModule:
    """Import *py_file* and extract its handler map.

    Args:
        py_file: The module to load.
        api_dir: Root of the api tree, used to build a unique module name.
        context: Passed to the module's ``setup()`` factory, if it has one.

    Raises:
        ModuleLoadError: If the module fails to import, its factory raises,
            or a method key is bound to something that is not callable.

    """
    module = _import_file(py_file, api_dir)
    exports: object = module

    factory = getattr(module, FACTORY_NAME, None)
    if callable(factory):
        try:
            exports = factory(context)
        except Exception as exc:
            msg = f"Handler factory {FACTORY_NAME}() in {py_file} failed: {exc}"
            raise ModuleLoadError(py_file, msg) from exc

    handlers: dict[MethodKey, HandlerFunc] = {}
    rules: dict[MethodKey, Any] = {}

    for key in MethodKey:
        func = _export(exports, key.value)
        if func is None:
            continue
        if not callable(func):
            msg = (
                f"Handler {key.value!r} in {py_file} must be callable, "
                f"got {type(func).__name__}"
            )
            raise ModuleLoadError(py_file, msg)
        handlers[key] = to_async(func)

        rule = _export(exports, f"{key.value}_rule")
        if rule is None:
            rule = _export(exports, f"{key.value}Rule")
        if rule is not None:
            rules[key] = rule

    return HandlerModule(source=py_file, handlers=handlers, rules=rules)


def _export(exports: object, name: str) -> Any:
    if isinstance(exports, Mapping):
        return exports.get(name)
    return getattr(exports, name, None)


def _import_file(py_file: Path, api_dir: Path) -> object:
    """Import a Python file as a module without touching ``sys.path``."""
    # app/api/sites/index.py -> perch_api.sites.index
    relative = py_file.relative_to(api_dir)
    module_name = _MODULE_NAMESPACE + "." + ".".join(relative.with_suffix("").parts)

    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        msg = f"Cannot create an import spec for {py_file}"
        raise ModuleLoadError(py_file, msg)

    try:
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to load handler module {py_file}: {exc}"
        raise ModuleLoadError(py_file, msg) from exc

    return module
