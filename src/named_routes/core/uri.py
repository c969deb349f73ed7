"""Uri facade: a template, its parsed parameters and a binder.

Example::

    from named_routes import Uri

    uri = Uri("/users/{id}/posts/{slug?}")
    uri.bind({"id": 42})                        # "/users/42/posts"
    uri.bind({"id": 42, "slug": "hello world"})  # "/users/42/posts/hello%20world"
    uri.bind([42, "intro"])                     # "/users/42/posts/intro"

A Uri never changes after construction; ``with_prefix`` and
``with_configuration`` return new instances.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from named_routes.config import BinderConfiguration, UriConfiguration

from .uri_parameter_binder import BindingResult, UriParameterBinder
from .uri_parameter_collection import UriParameterCollection

__all__ = ["Uri", "join_prefix"]


def join_prefix(prefix: str, template: str) -> str:
    """Prepend ``prefix`` to ``template`` with a single slash between them."""
    if not prefix:
        return template
    if not template:
        return prefix
    return prefix.rstrip("/") + "/" + template.lstrip("/")


class Uri:
    """Public entry point for parsing and binding a uri template.

    Attributes:
        template: The template string (after ``prepend_slash`` is applied).
        configuration: The ``UriConfiguration`` in effect.
        parameters: Parsed ``UriParameterCollection``.
    """

    __slots__ = ("template", "configuration", "_binder")

    def __init__(
        self, template: str, config: UriConfiguration | Mapping[str, Any] | None = None
    ) -> None:
        if not isinstance(template, str):
            raise TypeError(f"Uri template must be a string, got {type(template).__name__}")
        configuration: UriConfiguration = UriConfiguration.coerce(config)
        if configuration.prepend_slash and not template.startswith("/"):
            template = "/" + template
        self.template = template
        self.configuration = configuration
        self._binder = UriParameterBinder(template, configuration.parameters)

    @property
    def parameters(self) -> UriParameterCollection:
        return self._binder.parameters

    def bind(
        self, values: Any = None, config: BinderConfiguration | Mapping[str, Any] | None = None
    ) -> str:
        """Resolve the template with ``values``; see ``UriParameterBinder.bind``."""
        return self._binder.bind(values, config)

    def bind_mapping(
        self,
        values: Mapping[str, Any],
        config: BinderConfiguration | Mapping[str, Any] | None = None,
    ) -> BindingResult:
        return self._binder.bind_mapping(values, config)

    def can_bind_object(
        self,
        values: Mapping[str, Any],
        config: BinderConfiguration | Mapping[str, Any] | None = None,
    ) -> bool:
        return self._binder.can_bind_object(values, config)

    def with_prefix(self, prefix: str) -> Uri:
        """Return a new Uri with ``prefix`` prepended to the template."""
        if not prefix:
            return self
        return Uri(join_prefix(prefix, self.template), self.configuration)

    def with_configuration(self, overrides: UriConfiguration | Mapping[str, Any] | None) -> Uri:
        """Return a new Uri with ``overrides`` merged onto its configuration."""
        if not overrides:
            return self
        return Uri(self.template, self.configuration.merged(overrides))

    def __str__(self) -> str:
        return self.template

    def __repr__(self) -> str:
        return f"Uri({self.template!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Uri):
            return self.template == other.template and self.configuration == other.configuration
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.template)
