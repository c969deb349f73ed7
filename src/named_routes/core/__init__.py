"""Core runtime aggregator for Named Routes.

Exposes the building blocks from a single module:
``UriParameter``, ``UriParameterCollection``, ``UriParameterBinder``,
``Uri``, ``Route``, ``HttpMethod``, ``Router``.

Importing this module performs only imports; it does not register plugins
or instantiate routers.
"""

from .route import HttpMethod, Route
from .router import Router
from .uri import Uri
from .uri_parameter import UriParameter
from .uri_parameter_binder import BindingResult, UriParameterBinder, ValueShape
from .uri_parameter_collection import UriParameterCollection

__all__ = [
    "BindingResult",
    "HttpMethod",
    "Route",
    "Router",
    "Uri",
    "UriParameter",
    "UriParameterBinder",
    "UriParameterCollection",
    "ValueShape",
]
