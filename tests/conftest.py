"""Shared test fixtures for perch."""

from __future__ import annotations

from pathlib import Path

import pytest

from perch.observability import EventLog, MountCollector


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    """Create an application root with an empty ``app/api`` directory."""
    (tmp_path / "app" / "api").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def api_dir(app_root: Path) -> Path:
    """The canonical api directory inside ``app_root``."""
    return app_root / "app" / "api"


@pytest.fixture
def collector() -> MountCollector:
    """A collector that records into a fresh log without echoing."""
    return MountCollector(EventLog(), echo=False)


def write_module(api_dir: Path, relative: str, content: str) -> Path:
    """Write a handler module at *relative* under *api_dir* and return its path."""
    path = api_dir / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


# Minimal handler bodies, reused across test modules.
INDEX_SHOW = (
    "async def index(request, params):\n"
    "    return []\n"
    "\n"
    "async def show(request, id, params):\n"
    "    return {'id': id}\n"
)

ALL_HANDLERS = (
    "async def index(request, params):\n"
    "    return []\n"
    "async def show(request, id, params):\n"
    "    return {'id': id}\n"
    "async def create(request, params):\n"
    "    return params\n"
    "async def update(request, id, params):\n"
    "    return params\n"
    "async def destroy(request, id, params):\n"
    "    return None\n"
)
