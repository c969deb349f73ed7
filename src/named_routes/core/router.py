"""Named route registry with duplicate detection and registration plugins.

``Router`` maps route names to ``Route`` objects and keeps a second index of
``METHOD:url`` signatures used to detect two names pointing at the same
destination.

Internal state
--------------
- ``_routes``: name → Route, in registration order.
- ``_signatures``: ``METHOD:url`` → route name. Both maps are written
  together, after every check has passed.
- ``_route_prefix``: prefix active only while a ``prefix()`` callback runs.
- ``_plugins`` / ``_plugins_by_name``: attached plugin instances.
- ``_plugin_info``: per-plugin configuration store (``_all_`` and per route).

Registration pipeline
---------------------
``register_route(route)``:

1. each attached plugin's ``on_register`` may replace the route
2. ``immutable``: an existing name is rejected
3. the scoped prefix, if any, is prepended to the uri
4. unless ``duplicates`` is set, an existing signature is rejected
5. the route is stored, then ``on_registered`` runs for every plugin

Rejections call ``on_rejected`` on every plugin and raise ``RegistrationError``.

Global registry
---------------
``Router.register_plugin(plugin_class, name=None)`` makes a plugin available
to ``router.plug(name, **config)``.

Example::

    from named_routes import Router

    router = Router(duplicates=False).plug("logging")
    router.get("users.show", "/users/{id}")
    router.prefix("/api", lambda r: r.get("ping", "/ping"))
    router.url("users.show", {"id": 42})  # "/users/42"

``prefix()`` is not reentrant: calling it from inside a ``prefix()``
callback raises ``RegistrationError``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from genro_toolbox import dictExtract

from named_routes.config import BinderConfiguration, RouterConfiguration
from named_routes.exceptions import RegistrationError, RouteNotFound
from named_routes.plugins._base_plugin import BasePlugin

from .route import HttpMethod, Route
from .uri import Uri

__all__ = ["Router"]

_PLUGIN_REGISTRY: dict[str, type[BasePlugin]] = {}


@dataclass
class _PluginSpec:
    """Specification for creating plugin instances."""

    factory: type[BasePlugin]
    kwargs: dict[str, Any]

    def instantiate(self, router: Router) -> BasePlugin:
        return self.factory(router=router, **self.kwargs)


class Router:
    """Registry of named routes.

    Args:
        config: ``RouterConfiguration`` or mapping of its options.
        **options: Individual options (``immutable``, ``duplicates``) merged
            over ``config``.
    """

    __slots__ = (
        "config",
        "_routes",
        "_signatures",
        "_route_prefix",
        "_plugin_specs",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
    )

    def __init__(
        self, config: RouterConfiguration | Mapping[str, Any] | None = None, **options: Any
    ) -> None:
        self.config: RouterConfiguration = RouterConfiguration.coerce(config).merged(
            options or None
        )
        self._routes: dict[str, Route] = {}
        self._signatures: dict[str, str] = {}
        self._route_prefix: str | None = None
        self._plugin_specs: list[_PluginSpec] = []
        self._plugins: list[BasePlugin] = []
        self._plugins_by_name: dict[str, BasePlugin] = {}
        self._plugin_info: dict[str, dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: type[BasePlugin], name: str | None = None) -> None:
        """Make ``plugin_class`` attachable by name on every router.

        An explicit ``name`` replaces whatever is registered under it; without
        one, ``plugin_code`` is used and must not belong to another class.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> dict[str, type[BasePlugin]]:
        """Return a copy of the global plugin registry."""
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> Router:
        """Attach a registered plugin; its hooks run on every later registration.

        Returns the router so calls can be chained. A plugin attaches once per
        router; reconfigure it through ``router.<plugin>.configure()``.
        """
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin in self._plugins_by_name:
            raise ValueError(
                f"Plugin '{plugin}' is already attached to this router. "
                "Use configure() to update settings."
            )
        spec = _PluginSpec(plugin_class, dict(config))
        self._plugin_specs.append(spec)
        instance = spec.instantiate(self)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        return self

    def iter_plugins(self) -> list[BasePlugin]:
        """Return attached plugin instances in application order."""
        return list(self._plugins)

    def get_config(self, plugin_name: str, route_name: str | None = None) -> dict[str, Any]:
        """Return plugin config (router-wide + per-route overrides) for an attached plugin."""
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to router")
        return plugin.configuration(route_name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to router")
        return plugin

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register(self, name: str, method: HttpMethod | str, url: str | Uri, **kwargs: Any) -> Route:
        """Create and register a route from its parts.

        Keyword arguments prefixed with an attached plugin's code (for example
        ``logging_enabled=False``) configure that plugin for this route only;
        the others are stored in the route's ``extra``. A failed registration
        leaves the per-route plugin configuration as it was.
        """
        per_plugin = {
            plugin: dictExtract(kwargs, f"{plugin.plugin_code}_", slice_prefix=True, pop=True)
            for plugin in self._plugins
        }
        route = Route(name, method, url, kwargs)
        saved = self._snapshot_plugin_config(name)
        try:
            for plugin, plugin_kwargs in per_plugin.items():
                if plugin_kwargs:
                    plugin.configure(_target=name, **plugin_kwargs)
            return self.register_route(route)
        except (RegistrationError, ValueError):
            self._restore_plugin_config(name, saved)
            raise

    def _snapshot_plugin_config(self, name: str) -> dict[str, dict[str, Any] | None]:
        saved: dict[str, dict[str, Any] | None] = {}
        for plugin_name, bucket in self._plugin_info.items():
            current = bucket.get(name)
            saved[plugin_name] = None if current is None else dict(current)
        return saved

    def _restore_plugin_config(self, name: str, saved: dict[str, dict[str, Any] | None]) -> None:
        for plugin_name, bucket in self._plugin_info.items():
            previous = saved.get(plugin_name)
            if previous is None:
                bucket.pop(name, None)
            else:
                bucket[name] = previous

    def register_route(self, route: Route) -> Route:
        """Register a route object and return the route actually stored.

        Raises:
            RegistrationError: On an immutable name clash or a duplicate
                ``METHOD:url`` signature.
        """
        if not isinstance(route, Route):
            raise TypeError(f"register_route expects a Route, got {type(route).__name__}")

        for plugin in self._plugins:
            if plugin.is_enabled(route.name):
                route = plugin.on_register(self, route)

        if self.config.immutable and route.name in self._routes:
            self._reject(
                route,
                RegistrationError(
                    f"Route '{route.name}' is already defined and immutable!", route.name
                ),
            )

        if self._route_prefix is not None:
            route = route.with_prefix(self._route_prefix)

        signature = route.signature
        existing = self._signatures.get(signature)
        if not self.config.duplicates and existing is not None and existing != route.name:
            self._reject(
                route,
                RegistrationError(
                    f"Route '{route.name}' is a duplicate of existing route '{existing}'. "
                    "If you want to enable multiple aliases for the same url and method "
                    "combination, set 'duplicates' option as true.",
                    route.name,
                    existing,
                ),
            )

        previous = self._routes.get(route.name)
        if previous is not None and self._signatures.get(previous.signature) == route.name:
            self._release_signature(previous.signature, route.name)
        self._signatures[signature] = route.name
        self._routes[route.name] = route

        for plugin in self._plugins:
            if plugin.is_enabled(route.name):
                plugin.on_registered(self, route)
        return route

    def _release_signature(self, signature: str, name: str) -> None:
        # With duplicates allowed another route may still own the signature.
        for other_name, other in self._routes.items():
            if other_name != name and other.signature == signature:
                self._signatures[signature] = other_name
                return
        del self._signatures[signature]

    def _reject(self, route: Route, error: RegistrationError) -> None:
        for plugin in self._plugins:
            if plugin.is_enabled(route.name):
                plugin.on_rejected(self, route, error)
        raise error

    def get(self, name: str, url: str | Uri, **kwargs: Any) -> Route:
        return self.register(name, HttpMethod.GET, url, **kwargs)

    def head(self, name: str, url: str | Uri, **kwargs: Any) -> Route:
        return self.register(name, HttpMethod.HEAD, url, **kwargs)

    def post(self, name: str, url: str | Uri, **kwargs: Any) -> Route:
        return self.register(name, HttpMethod.POST, url, **kwargs)

    def put(self, name: str, url: str | Uri, **kwargs: Any) -> Route:
        return self.register(name, HttpMethod.PUT, url, **kwargs)

    def patch(self, name: str, url: str | Uri, **kwargs: Any) -> Route:
        return self.register(name, HttpMethod.PATCH, url, **kwargs)

    def delete(self, name: str, url: str | Uri, **kwargs: Any) -> Route:
        return self.register(name, HttpMethod.DELETE, url, **kwargs)

    def options(self, name: str, url: str | Uri, **kwargs: Any) -> Route:
        return self.register(name, HttpMethod.OPTIONS, url, **kwargs)

    def prefix(self, prefix: str, callback: Callable[[Router], Any]) -> None:
        """Prefix every route registered inside ``callback`` with ``prefix``.

        Raises:
            RegistrationError: If called while another prefix scope is active.
        """
        if self._route_prefix is not None:
            raise RegistrationError(
                f"Cannot open prefix scope '{prefix}' inside prefix scope "
                f"'{self._route_prefix}': prefix scopes do not nest."
            )
        self._route_prefix = prefix
        try:
            callback(self)
        finally:
            self._route_prefix = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def routes(self) -> Mapping[str, Route]:
        """Read-only view of name → Route."""
        return MappingProxyType(self._routes)

    @property
    def signatures(self) -> Mapping[str, str]:
        """Read-only view of ``METHOD:url`` → route name."""
        return MappingProxyType(self._signatures)

    def route(self, name: str) -> Route | None:
        """Return the route called ``name``, or None."""
        return self._routes.get(name)

    def has_route_with_name(self, name: str) -> bool:
        return name in self._routes

    def has_route_with_url(self, url: str, *methods: HttpMethod | str) -> bool:
        """Check if a route with ``url`` exists, for any of ``methods`` (default: all)."""
        candidates = methods or tuple(HttpMethod)
        return any(
            self.route_signature(method, url) in self._signatures for method in candidates
        )

    @staticmethod
    def route_signature(method: HttpMethod | str, url: str) -> str:
        """Return the ``METHOD:url`` signature of a destination."""
        return f"{HttpMethod.coerce(method).value}:{url}"

    def url(
        self,
        name: str,
        values: Any = None,
        config: BinderConfiguration | Mapping[str, Any] | None = None,
    ) -> str:
        """Resolve the url of the route called ``name``.

        Raises:
            RouteNotFound: If no route has that name.
            UriParameterBindingError: If ``values`` cannot be bound.
        """
        route = self._routes.get(name)
        if route is None:
            raise RouteNotFound(name)
        return route.uri.bind(values, config)

    def describe(self) -> dict[str, Any]:
        """Return introspection data for every route and attached plugin."""
        routes: dict[str, Any] = {}
        for route in self._routes.values():
            info: dict[str, Any] = {
                "method": route.method.value,
                "uri": route.url,
                "signature": route.signature,
                "parameters": [
                    {"name": p.name, "required": p.required} for p in route.uri.parameters
                ],
            }
            if route.extra:
                info["extra"] = dict(route.extra)
            plugins_info = {
                plugin.name: plugin.configuration(route.name) for plugin in self._plugins
            }
            if plugins_info:
                info["plugins"] = plugins_info
            routes[route.name] = info
        result: dict[str, Any] = {"config": self.config.model_dump(), "routes": routes}
        if self._plugins:
            result["plugins"] = {
                plugin.name: plugin.plugin_description for plugin in self._plugins
            }
        return result

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(list(self._routes.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __repr__(self) -> str:
        return f"<Router ({len(self._routes)} routes)>"
