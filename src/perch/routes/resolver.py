"""Convention resolver — walk an api tree into (prefix, resource, module) entries.

File and folder names map to URL paths.  Folders model resource ownership,
at most two levels deep::

    api/widgets.py                       -> /widgets
    api/sites/pages.py                   -> /sites/:parent_id/pages
    api/sites/pages/comments.py          -> /sites/:parent_id/pages/:child_id/comments
    api/sites/index.py                   -> /sites          (index folding)
    api/sites/pages/index.py             -> /sites/:parent_id/pages
    api/sites/pages/comments/            -> skipped, nesting too deep

An ``index`` module inside a folder describes the folder's own resource:
its prefix drops the two segments added on entering the folder and its
resource name becomes the folder name.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from perch.observability import MountCollector
from perch.routes.modules import HandlerModule, is_source_file, load_handler_module
from perch.routes.paths import Segment, UrlPath

# File stem that folds into its folder's resource
INDEX_NAME = "index"

# Directories never treated as resources
_IGNORED_DIRS: frozenset[str] = frozenset({"__pycache__"})

type ModuleLoader = Callable[[Path, Path, object], HandlerModule]


class NestingLevel(Enum):
    """Depth of parent/child resource ownership encoded in the URL."""

    ROOT = 0
    PARENT = 1
    CHILD = 2
    TOO_DEEP = 3

    @property
    def param(self) -> str | None:
        """Parameter introduced when descending from this level, if allowed."""
        return _LEVEL_PARAMS.get(self)

    def deeper(self) -> NestingLevel:
        if self is NestingLevel.TOO_DEEP:
            return self
        return NestingLevel(self.value + 1)


_LEVEL_PARAMS: dict[NestingLevel, str] = {
    NestingLevel.ROOT: "parent_id",
    NestingLevel.PARENT: "child_id",
}


@dataclass(frozen=True, slots=True)
class DirectoryNode:
    """A filesystem entry seen during the walk."""

    path: Path
    is_directory: bool
    level: NestingLevel


@dataclass(frozen=True, slots=True)
class ResourceEntry:
    """One handler module ready for binding.

    Attributes:
        prefix: URL prefix the resource's routes hang off.
        resource: Resource name (URL segment) for the routes.
        module: The loaded handler module.
        level: Nesting level of the file that produced the module.

    """

    prefix: UrlPath
    resource: str
    module: HandlerModule
    level: NestingLevel


def locate_api_dir(root: Path, api_dir: str, legacy_dir: str | None = None) -> Path | None:
    """Return the canonical api directory, else the legacy one, else ``None``."""
    for candidate in (api_dir, legacy_dir):
        if candidate is None:
            continue
        path = root / candidate
        if path.is_dir():
            return path
    return None


def resolve(
    api_dir: Path,
    prefix: UrlPath,
    *,
    context: object = None,
    collector: MountCollector | None = None,
    loader: ModuleLoader = load_handler_module,
) -> Iterator[ResourceEntry]:
    """Walk *api_dir* and yield one entry per handler module.

    Entries are produced lazily in sorted filesystem order.  A missing
    *api_dir* yields nothing.

    Raises:
        ModuleLoadError: Propagated from *loader*; aborts the walk.

    """
    if not api_dir.is_dir():
        return
    if collector is None:
        collector = MountCollector()
    yield from _walk(api_dir, prefix, NestingLevel.ROOT, api_dir, context, collector, loader)


def _walk(
    directory: Path,
    prefix: UrlPath,
    level: NestingLevel,
    api_dir: Path,
    context: object,
    collector: MountCollector,
    loader: ModuleLoader,
) -> Iterator[ResourceEntry]:
    for path in sorted(directory.iterdir()):
        node = DirectoryNode(path=path, is_directory=path.is_dir(), level=level)

        if node.is_directory:
            if path.name in _IGNORED_DIRS:
                continue
            param = level.param
            if param is None:
                collector.record_nesting_too_deep(str(path), level.deeper().value)
                continue
            yield from _walk(
                path,
                prefix.child(Segment(path.name), Segment.param(param)),
                level.deeper(),
                api_dir,
                context,
                collector,
                loader,
            )
            continue

        if not path.is_file() or not is_source_file(path):
            continue

        module = loader(path, api_dir, context)
        yield _entry_for(node, directory, prefix, module)


def _entry_for(
    node: DirectoryNode,
    directory: Path,
    prefix: UrlPath,
    module: HandlerModule,
) -> ResourceEntry:
    resource = node.path.stem
    if node.level is not NestingLevel.ROOT and resource == INDEX_NAME:
        # Pop the "<folder>/:<param>" pair appended on entering the folder
        return ResourceEntry(
            prefix=prefix.parent(2),
            resource=directory.name,
            module=module,
            level=node.level,
        )
    return ResourceEntry(prefix=prefix, resource=resource, module=module, level=node.level)
