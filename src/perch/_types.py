"""Shared type definitions for perch."""

from collections.abc import Callable, Mapping
from typing import Any

# HTTP verb in upper case (e.g., "GET", "DELETE")
type HttpMethod = str

# Route identity handed to the router (e.g., "GET:/api/widgets/:id")
type RouteName = str

# Normalized URL prefix (e.g., "/api", "")
type UrlPrefix = str

# Handler function exported by a handler module (sync or async)
type HandlerFunc = Callable[..., Any]

# chirp validation rules: field name -> list of validators
type ValidationRules = Mapping[str, list[Callable[[str], str | None]]]
