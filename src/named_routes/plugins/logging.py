"""Logging plugin for Named Routes.

Logs route registrations and rejections.

Configuration
-------------
Accepted keys (router-level or per-route):
    - ``enabled``: Gate the plugin entirely (default True)
    - ``before``: Log "<name> registering" before the registry checks (default False)
    - ``after``: Log "<name> registered as <METHOD:url>" (default True)
    - ``rejected``: Log "<name> rejected: <reason>" (default True)
    - ``log``: Use logger.info()/warning() when available (default True)
    - ``print``: Always use print() (default False)

Example::

    from named_routes import Router

    router = Router().plug("logging")
    router.get("home", "/")            # logs "home registered as GET:/"

    # Or configure per-route:
    router.get("ping", "/ping", logging_after=False)
"""

from __future__ import annotations

import logging
from typing import Any

from named_routes.core.route import Route
from named_routes.core.router import Router
from named_routes.exceptions import RegistrationError
from named_routes.plugins._base_plugin import BasePlugin


class LoggingPlugin(BasePlugin):
    """Logging plugin with configurable registration messages."""

    plugin_code = "logging"
    plugin_description = "Logs route registrations and rejections"

    __slots__ = ("_logger",)

    def __init__(self, router, *, logger: logging.Logger | None = None, **cfg):
        self._logger = logger or logging.getLogger("named_routes")
        super().__init__(router, **cfg)

    def configure(  # type: ignore[override]
        self,
        enabled: bool = True,
        before: bool = False,
        after: bool = True,
        rejected: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        pass  # Keys are listed in the module docstring; the wrapper stores them

    def _emit(self, message: str, *, cfg: dict[str, bool], level: int = logging.INFO):
        # A logger nobody listens to would drop registration messages.
        if not cfg["print"] and cfg["log"] and self._logger.hasHandlers():
            self._logger.log(level, message)
        elif cfg["print"] or cfg["log"]:
            print(message)

    def on_register(self, router: Router, route: Route) -> Route:
        cfg = self._effective_config(route.name)
        if cfg["before"]:
            self._emit(f"{route.name} registering", cfg=cfg)
        return route

    def on_registered(self, router: Router, route: Route) -> None:
        cfg = self._effective_config(route.name)
        if cfg["after"]:
            self._emit(f"{route.name} registered as {route.signature}", cfg=cfg)

    def on_rejected(self, router: Router, route: Route, error: RegistrationError) -> None:
        cfg = self._effective_config(route.name)
        if cfg["rejected"]:
            self._emit(f"{route.name} rejected: {error}", cfg=cfg, level=logging.WARNING)

    def _effective_config(self, route_name: str) -> dict[str, Any]:
        """Get effective configuration for a route, merging defaults."""
        defaults = {
            "enabled": True,
            "before": False,
            "after": True,
            "rejected": True,
            "log": True,
            "print": False,
        }
        cfg = defaults | self.configuration(route_name)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


Router.register_plugin(LoggingPlugin)
