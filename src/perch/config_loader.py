"""Load RestConfig from perch.yaml / perch.toml if present.

Merges file config with keyword overrides.  Overrides take precedence.
Keys may sit at the top level or under a ``rest:`` section::

    # perch.yaml
    rest:
      url_prefix: /api/v1
      auth_request: app.auth:check_token
"""

import importlib.util
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from perch._errors import ConfigError
from perch.config import RestConfig

_CONFIG_KEYS: frozenset[str] = frozenset({
    "url_prefix",
    "api_dir",
    "legacy_api_dir",
    "auth_request",
    "host",
    "port",
    "debug",
})


def load_config(root: Path, **overrides: object) -> RestConfig:
    """Load RestConfig from *root*, optionally merging perch.yaml.

    Looks for perch.yaml, perch.yml, or perch.toml in *root*.  A string
    ``auth_request`` of the form ``module:attr`` is imported relative to
    *root* (``app.auth:check`` -> ``<root>/app/auth.py``).

    Raises:
        ConfigError: If a config file is malformed, has unknown keys, or
            names an ``auth_request`` that cannot be resolved.

    """
    root = root.resolve()
    file_config = _read_perch_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}

    unknown = sorted(set(merged) - _CONFIG_KEYS)
    if unknown:
        msg = f"Unknown perch config key(s): {', '.join(unknown)}"
        raise ConfigError(msg)

    auth = merged.get("auth_request")
    if isinstance(auth, str):
        merged["auth_request"] = resolve_callable(root, auth)

    return RestConfig(root=root, **merged)  # type: ignore[arg-type]


def resolve_callable(root: Path, spec: str) -> Callable[..., Any]:
    """Import ``module:attr`` from a file under *root*.

    Raises:
        ConfigError: If the file or attribute is missing or not callable.

    """
    module_part, _, attr = spec.partition(":")
    if not module_part or not attr:
        msg = f"auth_request {spec!r}: expected 'module:attr'"
        raise ConfigError(msg)

    py_file = root.joinpath(*module_part.split(".")).with_suffix(".py")
    if not py_file.is_file():
        msg = f"auth_request {spec!r}: {py_file} not found"
        raise ConfigError(msg)

    module_name = f"perch_config_{module_part.replace('.', '_')}"
    spec_obj = importlib.util.spec_from_file_location(module_name, py_file)
    if spec_obj is None or spec_obj.loader is None:
        msg = f"auth_request {spec!r}: failed to load {py_file}"
        raise ConfigError(msg)
    module = importlib.util.module_from_spec(spec_obj)
    sys.modules[module_name] = module
    try:
        spec_obj.loader.exec_module(module)
    except Exception as exc:
        msg = f"auth_request {spec!r}: error importing {py_file}: {exc}"
        raise ConfigError(msg) from exc

    callable_obj = getattr(module, attr, None)
    if not callable(callable_obj):
        msg = f"auth_request {spec!r}: {attr} not callable in {py_file}"
        raise ConfigError(msg)
    return callable_obj


def _read_perch_config(root: Path) -> dict[str, object]:
    """Read perch config from yaml/toml if present.  Returns empty dict otherwise."""
    for name in ("perch.yaml", "perch.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "perch.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at the top level"
        raise ConfigError(msg)
    return _flatten_rest_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc
    return _flatten_rest_section(data)


def _flatten_rest_section(data: dict[str, object]) -> dict[str, object]:
    """Extract rest.* keys into top-level config."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k != "rest" and k in _CONFIG_KEYS:
            result[k] = v
    rest = data.get("rest")
    if isinstance(rest, dict):
        for k, v in rest.items():
            result[k] = v
    return result
