"""Route value object and HTTP method enumeration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from .uri import Uri

__all__ = ["HttpMethod", "Route"]


class HttpMethod(str, Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @classmethod
    def coerce(cls, method: HttpMethod | str) -> HttpMethod:
        """Return ``method`` as an ``HttpMethod`` (strings are case-insensitive)."""
        if isinstance(method, cls):
            return method
        if not isinstance(method, str):
            raise TypeError(f"HTTP method must be a string, got {type(method).__name__}")
        try:
            return cls(method.upper())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown HTTP method '{method}'. Allowed: {allowed}") from None


@dataclass(frozen=True)
class Route:
    """Immutable binding of a name to an HTTP method and a uri.

    ``uri`` may be given as a template string; ``extra`` is exposed as a
    read-only mapping and is never interpreted by the router.
    """

    name: str
    method: HttpMethod
    uri: Uri
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Route name must be a non-empty string")
        object.__setattr__(self, "method", HttpMethod.coerce(self.method))
        if isinstance(self.uri, str):
            object.__setattr__(self, "uri", Uri(self.uri))
        elif not isinstance(self.uri, Uri):
            raise TypeError(f"Route uri must be a Uri or a string, got {type(self.uri).__name__}")
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    def __hash__(self) -> int:
        return hash((self.name, self.method, self.url))

    @property
    def url(self) -> str:
        """The uri template of this route."""
        return self.uri.template

    @property
    def signature(self) -> str:
        """``METHOD:url`` key used for duplicate detection."""
        return f"{self.method.value}:{self.url}"

    def with_prefix(self, prefix: str) -> Route:
        return replace(self, uri=self.uri.with_prefix(prefix))

    def with_uri(self, uri: Uri) -> Route:
        return replace(self, uri=uri)

    def with_extra(self, extra: Mapping[str, Any]) -> Route:
        """Return a copy whose extra is this route's extra updated with ``extra``."""
        return replace(self, extra={**self.extra, **extra})

    def bind(self, values: Any = None, config: Any = None) -> str:
        return self.uri.bind(values, config)
