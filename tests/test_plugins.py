# Copyright 2025 Softwell S.r.l.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for registration plugins (configuration, logging, custom)."""

import logging

import pytest
from pydantic import ValidationError

import named_routes.plugins.configuration  # noqa: F401
import named_routes.plugins.logging  # noqa: F401
from named_routes import RegistrationError, Route, Router
from named_routes.plugins._base_plugin import BasePlugin  # Not public API


class DummyLogger:
    def __init__(self):
        self.records = []

    def hasHandlers(self):  # noqa: N802
        return True

    def log(self, level, message):
        self.records.append((level, message))


class TestConfigurationPlugin:
    def test_prefix_and_extra_are_applied(self):
        router = Router().plug("configuration", prefix="/v1", extra={"auth": True})
        route = router.get("users.show", "/users/{id}")
        assert route.url == "/v1/users/{id}"
        assert route.extra == {"auth": True}
        assert router.url("users.show", {"id": 3}) == "/v1/users/3"

    def test_configured_extra_wins_over_route_extra(self):
        router = Router().plug("configuration", extra={"auth": True})
        route = router.get("a", "/a", auth=False, public=True)
        assert route.extra == {"auth": True, "public": True}

    def test_per_route_override_through_prefixed_kwargs(self):
        router = Router().plug("configuration", prefix="/v1")
        route = router.get("health", "/health", configuration_prefix="")
        assert route.url == "/health"
        assert "configuration_prefix" not in route.extra
        assert router.get("other", "/other").url == "/v1/other"

    def test_disabled_per_route(self):
        router = Router().plug("configuration", prefix="/v1")
        assert router.get("raw", "/raw", configuration_enabled=False).url == "/raw"

    def test_uri_options(self):
        router = Router().plug(
            "configuration", uris={"parameters": {"bind_get_parameters": True}}
        )
        router.get("search", "/search")
        assert router.url("search", {"q": "x"}) == "/search?q=x"

    def test_prefix_applies_before_duplicate_check(self):
        router = Router().plug("configuration", prefix="/v1")
        router.get("a", "/a")
        router.get("b", "/a", configuration_prefix="/v2")
        with pytest.raises(RegistrationError):
            router.get("c", "/a")

    def test_scoped_prefix_wraps_plugin_prefix(self):
        router = Router().plug("configuration", prefix="/v1")
        router.prefix("/api", lambda r: r.get("p", "/p"))
        assert router.route("p").url == "/api/v1/p"

    def test_invalid_configuration(self):
        with pytest.raises(ValidationError):
            Router().plug("configuration", prefix=["not", "a", "string"])

    def test_registrar_configuration(self):
        router = Router().plug("configuration", prefix="/v1")
        config = router.configuration.registrar_configuration()
        assert config.prefix == "/v1"
        assert config.extra == {}


class TestLoggingPlugin:
    def test_logs_registration(self):
        router = Router().plug("logging")
        logger = DummyLogger()
        router.logging._logger = logger
        router.get("home", "/")
        assert logger.records == [(logging.INFO, "home registered as GET:/")]

    def test_logs_rejection_as_warning(self):
        router = Router().plug("logging")
        logger = DummyLogger()
        router.logging._logger = logger
        router.get("a", "/a")
        with pytest.raises(RegistrationError):
            router.get("b", "/a")
        level, message = logger.records[-1]
        assert level == logging.WARNING
        assert message.startswith("b rejected: Route 'b' is a duplicate")

    def test_before_flag(self):
        router = Router().plug("logging", before=True)
        logger = DummyLogger()
        router.logging._logger = logger
        router.get("home", "/")
        assert [m for _, m in logger.records] == ["home registering", "home registered as GET:/"]

    def test_per_route_flags(self):
        router = Router().plug("logging")
        logger = DummyLogger()
        router.logging._logger = logger
        router.get("quiet", "/quiet", logging_after=False)
        router.get("silent", "/silent", logging_flags="enabled:off")
        router.get("loud", "/loud")
        assert [m for _, m in logger.records] == ["loud registered as GET:/loud"]

    def test_rejected_registration_keeps_route_config(self):
        router = Router(immutable=True).plug("logging")
        router.get("a", "/a")
        with pytest.raises(RegistrationError):
            router.get("a", "/b", logging_rejected=False)
        assert router.get_config("logging", "a") == {"enabled": True}

    def test_rejected_registration_restores_previous_override(self):
        router = Router().plug("logging")
        router.get("a", "/a", logging_before=True)
        with pytest.raises(RegistrationError):
            router.get("b", "/a", logging_after=False)
        assert router.get_config("logging", "a") == {"enabled": True, "before": True}
        assert router.get_config("logging", "b") == {"enabled": True}

    def test_invalid_override_leaves_no_partial_config(self):
        router = Router().plug("logging").plug("rename")
        with pytest.raises(ValidationError):
            router.get("a", "/a", logging_after=False, rename_namespace=["bad"])
        assert router.get_config("logging", "a") == {"enabled": True}
        assert not router.has_route_with_name("a")

    def test_falls_back_to_print_without_handlers(self, capsys):
        class SilentLogger(DummyLogger):
            def hasHandlers(self):  # noqa: N802
                return False

        logger = SilentLogger()
        router = Router().plug("logging", logger=logger)
        router.get("home", "/")
        assert logger.records == []
        assert "home registered as GET:/" in capsys.readouterr().out

    def test_print_sink(self, capsys):
        router = Router().plug("logging", print=True)
        router.get("home", "/")
        assert "home registered as GET:/" in capsys.readouterr().out

    def test_real_logger(self, caplog):
        caplog.set_level(logging.INFO, logger="named_routes")
        router = Router().plug("logging")
        router.post("store", "/items")
        assert "store registered as POST:/items" in caplog.text

    def test_logger_injection(self):
        logger = DummyLogger()
        router = Router().plug("logging", logger=logger)
        router.get("home", "/")
        assert logger.records

    def test_rejects_invalid_flag_value(self):
        with pytest.raises(ValidationError):
            Router().plug("logging", before="sometimes")


class RenamePlugin(BasePlugin):
    plugin_code = "rename"
    plugin_description = "Prefixes route names for tests"

    def __init__(self, router, **config):
        super().__init__(router, **config)
        self.registered = []
        self.rejected = []

    def configure(self, enabled: bool = True, namespace: str = ""):  # type: ignore[override]
        pass

    def on_register(self, router, route):
        namespace = self.configuration(route.name).get("namespace")
        if not namespace:
            return route
        return Route(f"{namespace}.{route.name}", route.method, route.uri, route.extra)

    def on_registered(self, router, route):
        self.registered.append(route.name)

    def on_rejected(self, router, route, error):
        self.rejected.append((route.name, error.conflicting))


Router.register_plugin(RenamePlugin)


class TestCustomPlugin:
    def test_on_register_can_replace_route(self):
        router = Router().plug("rename", namespace="admin")
        router.get("users", "/users")
        assert router.has_route_with_name("admin.users")
        assert router.rename.registered == ["admin.users"]

    def test_on_rejected_is_notified(self):
        router = Router().plug("rename")
        router.get("a", "/a")
        with pytest.raises(RegistrationError):
            router.get("b", "/a")
        assert router.rename.rejected == [("b", "a")]

    def test_configure_after_plug(self):
        router = Router().plug("rename")
        router.rename.configure(namespace="api")
        assert router.get("x", "/x").name == "api.x"
        router.rename.configure(_target="y,z", namespace="")
        assert router.get("y", "/y").name == "y"

    def test_get_config(self):
        router = Router().plug("rename", namespace="n")
        router.get("x", "/x", rename_namespace="m")
        assert router.get_config("rename") == {"enabled": True, "namespace": "n"}
        assert router.get_config("rename", "x") == {"enabled": True, "namespace": "m"}
        assert router.route("m.x") is not None

    def test_describe_lists_plugins(self):
        router = Router().plug("rename")
        router.get("x", "/x")
        info = router.describe()
        assert info["plugins"] == {"rename": "Prefixes route names for tests"}
        assert info["routes"]["x"]["plugins"] == {"rename": {"enabled": True}}


class TestPluginRegistry:
    def test_unknown_plugin(self):
        with pytest.raises(ValueError, match="Unknown plugin 'nope'"):
            Router().plug("nope")

    def test_plugin_attached_twice(self):
        router = Router().plug("logging")
        with pytest.raises(ValueError, match="already attached"):
            router.plug("logging")

    def test_plugin_must_be_named(self):
        with pytest.raises(TypeError):
            Router().plug(RenamePlugin)

    def test_register_rejects_non_plugins(self):
        with pytest.raises(TypeError):
            Router.register_plugin(object)

    def test_register_requires_plugin_code(self):
        class Nameless(BasePlugin):
            pass

        with pytest.raises(ValueError, match="missing plugin_code"):
            Router.register_plugin(Nameless)

    def test_register_collision(self):
        class Other(BasePlugin):
            plugin_code = "logging"

        with pytest.raises(ValueError, match="already registered"):
            Router.register_plugin(Other)

    def test_available_plugins(self):
        available = Router.available_plugins()
        assert {"configuration", "logging", "rename"} <= set(available)

    def test_missing_plugin_attribute(self):
        router = Router()
        with pytest.raises(AttributeError):
            router.nope  # noqa: B018
        with pytest.raises(AttributeError):
            router.get_config("nope")

    def test_iter_plugins_in_attach_order(self):
        router = Router().plug("logging").plug("configuration")
        assert [p.name for p in router.iter_plugins()] == ["logging", "configuration"]
