"""Plugin contract for route registration middleware.

Plugins sit between ``Router.register_route`` and the registry: they may
replace a route before the registry checks run, and observe the outcome.

``BasePlugin``
    Base class every plugin must subclass. Provides:
        - Configuration helpers backed by the router's ``_plugin_info`` store
        - Hooks ``on_register``, ``on_registered`` and ``on_rejected``

    Required class attributes:
        - ``plugin_code``: unique identifier used for registration (e.g. "logging")
        - ``plugin_description``: human-readable description of the plugin

    Constructor signature: ``BasePlugin(router, **config)``

    Key methods:
        - ``configure(**config)``: Define accepted configuration parameters
        - ``configuration(route_name=None)``: Read merged configuration
        - ``on_register(router, route)``: Return the route to register
        - ``on_registered(router, route)``: Called after insertion
        - ``on_rejected(router, route, error)``: Called before a
          ``RegistrationError`` propagates

Example::

    from named_routes.plugins._base_plugin import BasePlugin

    class VersionPlugin(BasePlugin):
        plugin_code = "version"
        plugin_description = "Prefixes every route with an API version"

        def configure(self, version: str = "v1"):
            pass  # Storage handled by wrapper

        def on_register(self, router, route):
            cfg = self.configuration(route.name)
            return route.with_prefix(f"/{cfg['version']}")
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from pydantic import validate_call

if TYPE_CHECKING:
    from named_routes.core.route import Route
    from named_routes.exceptions import RegistrationError

__all__ = ["BasePlugin"]

_ALL = "_all_"


def _wrap_configure(original_configure: Callable) -> Callable:
    """Validate configure() arguments and store them under each requested target."""
    validated = validate_call(original_configure)

    @wraps(original_configure)
    def wrapper(
        self: BasePlugin, *, _target: str = _ALL, flags: str | None = None, **kwargs: Any
    ) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))

        if "," in _target:
            for target in (t.strip() for t in _target.split(",")):
                if target:
                    wrapper(self, _target=target, **kwargs)
            return

        validated(self, **kwargs)
        self._write_config(_target, kwargs)

    return wrapper


class BasePlugin:
    """Hook interface and configuration helpers for registration plugins.

    Subclass this to create custom plugins. Override the hooks you need
    and define your configuration schema in ``configure()``.
    """

    __slots__ = ("name", "_router")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])  # type: ignore[method-assign]

    def __init__(self, router: Any, **config: Any):
        self.name = self.plugin_code
        self._router = router
        self._init_store()
        self.configure(**config)

    def _init_store(self) -> None:
        store = self._get_store()
        store.setdefault(self.name, {}).setdefault(_ALL, {"enabled": True})

    def _write_config(self, target: str, config: dict[str, Any]) -> None:
        if not config:
            return
        bucket = self._get_store().setdefault(self.name, {})
        bucket.setdefault(target, {}).update(config)

    def configuration(self, route_name: str | None = None) -> dict[str, Any]:
        """Return the router-wide configuration with ``route_name`` overrides on top."""
        bucket = self._get_store().get(self.name)
        if not bucket:
            return {}
        merged = dict(bucket.get(_ALL, {}))
        if route_name:
            merged.update(bucket.get(route_name, {}))
        return merged

    def is_enabled(self, route_name: str | None = None) -> bool:
        return bool(self.configuration(route_name).get("enabled", True))

    def _parse_flags(self, flags: str) -> dict[str, bool]:
        """Parse flag string like "enabled,before:off" into boolean dict."""
        mapping: dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def _get_store(self) -> dict[str, Any]:
        return self._router._plugin_info  # type: ignore[no-any-return]

    # =========================================================================
    # METHODS TO OVERRIDE IN CUSTOM PLUGINS
    # =========================================================================

    def configure(
        self, *, _target: str = _ALL, flags: str | None = None, enabled: bool | None = None
    ) -> None:
        """Override to define accepted configuration parameters.

        The wrapper added by ``__init_subclass__`` handles:
            - Parsing ``flags`` (e.g. "enabled,before:off") into booleans
            - Routing to ``_target`` ("_all_", a route name, or comma-separated)
            - Pydantic validation via ``@validate_call``
            - Writing to the router's config store

        Subclasses should declare ``enabled: bool = True`` so the gate can be
        configured per route.
        """
        kwargs: dict[str, Any] = self._parse_flags(flags) if flags else {}
        if enabled is not None:
            kwargs["enabled"] = enabled
        self._write_config(_target, kwargs)

    def on_register(self, router: Any, route: Route) -> Route:
        """Return the route that should reach the registry.

        Called in attach order before immutability and duplicate checks.
        Return ``route`` unchanged, or a new ``Route`` built from it.
        """
        return route

    def on_registered(self, router: Any, route: Route) -> None:  # pragma: no cover - default no-op
        """Observe a route that has just been inserted in the registry."""

    def on_rejected(
        self, router: Any, route: Route, error: RegistrationError
    ) -> None:  # pragma: no cover - default no-op
        """Observe a route the registry refused; ``error`` is raised afterwards."""
