"""Configuration plugin for Named Routes.

Applies a ``RegistrarConfiguration`` to every route before it reaches the
registry:

- ``prefix``: prepended to the route's uri template
- ``uris``: ``UriConfiguration`` overrides merged onto the route's uri
- ``extra``: merged over the route's own ``extra`` (configured keys win)

The incoming route is never modified; a new ``Route`` is returned.

Example::

    from named_routes import Router

    router = Router().plug("configuration", prefix="/v1", extra={"auth": True})
    router.get("users.show", "/users/{id}").url  # "/v1/users/{id}"

    # Per-route override through prefixed keyword arguments:
    router.get("health", "/health", configuration_prefix="")
"""

from __future__ import annotations

from typing import Any

from named_routes.config import RegistrarConfiguration
from named_routes.core.route import Route
from named_routes.core.router import Router
from named_routes.plugins._base_plugin import BasePlugin


class ConfigurationPlugin(BasePlugin):
    """Rewrite routes with a configured prefix, uri options and extra metadata."""

    plugin_code = "configuration"
    plugin_description = "Applies prefix, uri options and extra metadata to routes"

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        prefix: str = "",
        extra: dict[str, Any] | None = None,
        uris: dict[str, Any] | None = None,
    ):
        """Configure the options applied to registered routes.

        Args:
            enabled: Enable/disable the plugin entirely.
            prefix: String prepended to every uri template.
            extra: Metadata merged into every route's extra.
            uris: ``UriConfiguration`` overrides (e.g. ``{"prepend_slash": True}``).
        """
        pass  # Storage is handled by the wrapper

    def registrar_configuration(self, route_name: str | None = None) -> RegistrarConfiguration:
        """Return the effective ``RegistrarConfiguration`` for a route."""
        cfg = self.configuration(route_name)
        return RegistrarConfiguration(
            prefix=cfg.get("prefix") or "",
            extra=cfg.get("extra") or {},
            uris=cfg.get("uris") or {},
        )

    def on_register(self, router: Router, route: Route) -> Route:
        configuration = self.registrar_configuration(route.name)
        uri = route.uri.with_configuration(configuration.uris).with_prefix(configuration.prefix)
        return Route(route.name, route.method, uri, {**route.extra, **configuration.extra})


Router.register_plugin(ConfigurationPlugin)
