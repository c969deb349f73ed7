"""Configuration records consumed by Named Routes.

Every record is a frozen pydantic model that rejects unknown keys, so a
mistyped option fails at construction time with ``pydantic.ValidationError``.

Models
------
``BinderConfiguration``
    Options used while binding values into a uri template:
        - ``bind_get_parameters``: append unmatched mapping keys as a query string
        - ``type_conversion_function``: ``(value) -> str | None`` used for
          non-string values; ``None`` signals a conversion failure

``UriConfiguration``
    Options of a ``Uri``: ``prepend_slash`` and the nested binder
    ``parameters``.

``RouterConfiguration``
    Registry policy: ``immutable`` and ``duplicates``.

``RegistrarConfiguration``
    Options of the ``configuration`` plugin: ``prefix``, ``extra`` and
    ``uris`` (``UriConfiguration`` overrides).

Consumers accept a model instance, a plain mapping or ``None`` through
``coerce()``; ``merged()`` layers overrides on top of an existing record,
recursing into nested records.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "BinderConfiguration",
    "RegistrarConfiguration",
    "RouterConfiguration",
    "UriConfiguration",
    "default_type_conversion",
]


def default_type_conversion(value: Any) -> str | None:
    """Stringify scalars commonly found in uri parameters.

    Returns ``None`` for values that have no sensible uri representation
    (containers, arbitrary objects).
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return default_type_conversion(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal, UUID)):
        return str(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    return None


class _Configuration(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def coerce(cls, value: Any = None):
        """Return ``value`` as an instance of this configuration class."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(
            f"{cls.__name__} expects a mapping or {cls.__name__} instance, "
            f"got {type(value).__name__}"
        )

    def merged(self, overrides: Any = None):
        """Return a new record with ``overrides`` applied on top of this one."""
        if overrides is None:
            return self
        if isinstance(overrides, _Configuration):
            overrides = overrides.model_dump(exclude_unset=True)
        elif not isinstance(overrides, Mapping):
            raise TypeError(
                f"Configuration overrides must be a mapping, got {type(overrides).__name__}"
            )
        values = {name: getattr(self, name) for name in type(self).model_fields}
        for key, value in overrides.items():
            current = values.get(key)
            if isinstance(current, _Configuration) and isinstance(value, Mapping):
                value = current.merged(value)
            values[key] = value
        return type(self).model_validate(values)


class BinderConfiguration(_Configuration):
    """Options used by ``UriParameterBinder``."""

    bind_get_parameters: bool = False
    type_conversion_function: Callable[[Any], str | None] = default_type_conversion


class UriConfiguration(_Configuration):
    """Options used by ``Uri``."""

    prepend_slash: bool = False
    parameters: BinderConfiguration = Field(default_factory=BinderConfiguration)


class RouterConfiguration(_Configuration):
    """Registry policy for ``Router``."""

    immutable: bool = False
    duplicates: bool = False


class RegistrarConfiguration(_Configuration):
    """Options applied to routes by the ``configuration`` plugin."""

    prefix: str = ""
    extra: dict[str, Any] = Field(default_factory=dict)
    uris: dict[str, Any] = Field(default_factory=dict)
