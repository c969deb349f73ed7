"""Named Routes - named route registry and uri template engine for Python.

Public API surface for registering routes under symbolic names, detecting
conflicting registrations, and resolving uri templates such as
``/users/{id}/posts/{slug?}`` into concrete urls.

Public exports:
    - ``Router``: Registry of named routes with duplicate detection
    - ``Route``: Immutable name/method/uri/extra value
    - ``Uri``: Parsed uri template with value binding
    - ``HttpMethod``: HTTP verbs accepted by the router
    - Configuration records and the exception taxonomy

Plugin registration happens lazily via ``import_module`` to avoid cycles.
Built-in plugins (configuration, logging) are auto-registered on first import.

Example::

    from named_routes import Router

    router = Router()
    router.get("users.show", "/users/{id}/posts/{slug?}")
    router.url("users.show", {"id": 42})  # "/users/42/posts"
"""

from importlib import import_module

__version__ = "0.1.0"

from .config import (
    BinderConfiguration,
    RegistrarConfiguration,
    RouterConfiguration,
    UriConfiguration,
    default_type_conversion,
)
from .core import (
    BindingResult,
    HttpMethod,
    Route,
    Router,
    Uri,
    UriParameter,
    UriParameterCollection,
)
from .exceptions import (
    RegistrationError,
    RouteNotFound,
    TypeConversionError,
    UriParameterBindingError,
    UriParameterSyntaxError,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("configuration", "logging"):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "BinderConfiguration",
    "BindingResult",
    "HttpMethod",
    "RegistrarConfiguration",
    "Route",
    "Router",
    "RouterConfiguration",
    "Uri",
    "UriConfiguration",
    "UriParameter",
    "UriParameterCollection",
    "default_type_conversion",
    "RegistrationError",
    "RouteNotFound",
    "TypeConversionError",
    "UriParameterBindingError",
    "UriParameterSyntaxError",
]
