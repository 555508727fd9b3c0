"""Structured URL paths for convention-derived routes.

A URL template is an ordered tuple of segments, each either a literal
(``widgets``) or a path parameter (``:id``).  Nested-resource prefixes are
built by appending segments and folded back by popping them, so a resource
that happens to share its name with a parameter can never be mangled by a
substring match.

    UrlPath.parse("/api").child(Segment("sites"), Segment.param("parent_id"))
    -> /api/sites/:parent_id

The canonical rendering uses ``:name`` tokens.  Chirp expects ``{name}``;
``chirp_path()`` produces that form at registration time.
"""

import re
from dataclasses import dataclass

_TRAILING_SLASHES = re.compile(r"/+$")
_LEADING_SLASHES = re.compile(r"^/+")


def normalize_prefix(prefix: str) -> str:
    """Normalize a configured URL prefix.

    Trailing slashes are stripped, then leading slashes collapse to one::

        "/api/"  -> "/api"
        "///a//" -> "/a"
        "/"      -> ""

    Idempotent: ``normalize_prefix(normalize_prefix(p)) == normalize_prefix(p)``.
    """
    prefix = _TRAILING_SLASHES.sub("", prefix)
    return _LEADING_SLASHES.sub("/", prefix)


@dataclass(frozen=True, slots=True)
class Segment:
    """One component of a URL path.

    Attributes:
        value: Literal text, or the parameter name when ``is_param`` is set.
        is_param: True for a path parameter such as ``:id``.

    """

    value: str
    is_param: bool = False

    @classmethod
    def param(cls, name: str) -> Segment:
        return cls(name, is_param=True)

    def render(self) -> str:
        return f":{self.value}" if self.is_param else self.value

    def chirp(self) -> str:
        return f"{{{self.value}}}" if self.is_param else self.value


@dataclass(frozen=True, slots=True)
class UrlPath:
    """An immutable, ordered list of URL segments."""

    segments: tuple[Segment, ...] = ()

    @classmethod
    def parse(cls, text: str) -> UrlPath:
        """Split *text* on ``/``; ``:name`` parts become parameter segments."""
        segments: list[Segment] = []
        for part in text.split("/"):
            if not part:
                continue
            if part.startswith(":") and len(part) > 1:
                segments.append(Segment.param(part[1:]))
            else:
                segments.append(Segment(part))
        return cls(tuple(segments))

    def child(self, *segments: Segment) -> UrlPath:
        """Return a new path with *segments* appended."""
        return UrlPath((*self.segments, *segments))

    def parent(self, count: int = 1) -> UrlPath:
        """Return a new path with the last *count* segments removed.

        Raises:
            ValueError: If the path has fewer than *count* segments.

        """
        if count > len(self.segments):
            msg = f"Cannot pop {count} segment(s) from {self.render()!r}"
            raise ValueError(msg)
        return UrlPath(self.segments[: len(self.segments) - count])

    @property
    def params(self) -> tuple[str, ...]:
        """Names of the parameter segments, in order."""
        return tuple(s.value for s in self.segments if s.is_param)

    def extract(self, request_path: str) -> dict[str, str]:
        """Read parameter values out of a concrete *request_path* by position.

        Segments are aligned from the right, so a path served below a mount
        point still lines up.  The router's captured names are not used;
        chirp names a shared parameter position after its first route.
        """
        parts = [p for p in request_path.split("/") if p]
        return {
            segment.value: part
            for segment, part in zip(reversed(self.segments), reversed(parts))
            if segment.is_param
        }

    def render(self) -> str:
        """Render with ``:name`` tokens; the empty path renders as ``""``."""
        return "".join("/" + s.render() for s in self.segments)

    def chirp_path(self) -> str:
        """Render with chirp's ``{name}`` tokens; the empty path is ``/``."""
        return "".join("/" + s.chirp() for s in self.segments) or "/"

    def __str__(self) -> str:
        return self.render()

    def __len__(self) -> int:
        return len(self.segments)
