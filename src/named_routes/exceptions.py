# Copyright 2025 Softwell S.r.l. - All Rights Reserved
# SPDX-License-Identifier: Apache-2.0
"""Exceptions for Named Routes.

This module defines the exceptions raised while parsing uri templates,
binding values into them and registering routes.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "UriParameterSyntaxError",
    "UriParameterBindingError",
    "TypeConversionError",
    "RegistrationError",
    "RouteNotFound",
]


class UriParameterSyntaxError(ValueError):
    """Raised when a placeholder token in a uri template is malformed.

    Attributes:
        template: The template being parsed.
        position: Index in ``template`` where the faulty token starts.
    """

    def __init__(self, message: str, template: str = "", position: int | None = None) -> None:
        self.template = template
        self.position = position
        super().__init__(message)


class UriParameterBindingError(Exception):
    """Raised when values cannot be bound to the placeholders of a uri.

    Attributes:
        parameter: Name of the offending parameter, when there is one.
        cause: The wrapped exception (usually a ``TypeConversionError``).
    """

    def __init__(
        self, message: str, parameter: str | None = None, cause: BaseException | None = None
    ) -> None:
        self.parameter = parameter
        self.cause = cause
        super().__init__(message)


class TypeConversionError(Exception):
    """Raised when a value cannot be converted to a string.

    Never surfaces from ``bind()``: the binder re-raises it as a
    ``UriParameterBindingError`` carrying the placeholder context.

    Attributes:
        value: The value that failed to convert.
    """

    def __init__(self, message: str, value: Any = None) -> None:
        self.value = value
        super().__init__(message)


class RegistrationError(Exception):
    """Raised when a route cannot be added to a router.

    Attributes:
        route_name: Name of the route being registered, None when the error
            is not about a single route (a nested prefix scope).
        conflicting: Name of the already registered route it clashes with.
    """

    def __init__(
        self, message: str, route_name: str | None = None, conflicting: str | None = None
    ) -> None:
        self.route_name = route_name
        self.conflicting = conflicting
        super().__init__(message)


class RouteNotFound(LookupError):
    """Raised when a route name is not registered.

    Attributes:
        name: The route name that was looked up.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route '{name}' not found")
