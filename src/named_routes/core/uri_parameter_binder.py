"""Binding of runtime values into parsed uri templates.

Not part of the public surface: ``Uri`` wraps a binder and is the entry point
callers use.

Value shapes
------------
``bind(values)`` classifies ``values`` once and hands it to one handler:

- ``ValueShape.MAPPING``: each parameter takes the value stored under its
  name. Keys not consumed by a placeholder are appended as a query string
  when ``bind_get_parameters`` is enabled.
- ``ValueShape.SEQUENCE`` (list/tuple): the i-th item binds to the i-th
  parameter. Extra items are ignored, missing items count as absent.
- ``ValueShape.SCALAR`` (anything else, including ``str``): legal only when
  the template has at most one required parameter.

The caller's mapping is never modified; ``bind_mapping`` reports which keys
were consumed and which remain.

Per-parameter rules
-------------------
- ``None`` and missing values are absent: an error for required
  parameters, the empty string for optional ones.
- Non-string values go through ``type_conversion_function``; a ``None``
  result or a ``TypeConversionError`` becomes a ``UriParameterBindingError``.
- The string is stripped; an empty result is an error for required parameters.
- The value is percent-encoded like ``encodeURIComponent`` and replaces the
  placeholder; trailing slashes are then stripped from the url.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

from named_routes.config import BinderConfiguration
from named_routes.exceptions import TypeConversionError, UriParameterBindingError

from .uri_parameter import UriParameter
from .uri_parameter_collection import UriParameterCollection

__all__ = ["BindingResult", "UriParameterBinder", "ValueShape"]

# Characters encodeURIComponent leaves untouched besides alphanumerics and -_.~
_SAFE_CHARS = "!~*'()"

_MISSING: Any = object()


class ValueShape(Enum):
    """Shape of the values handed to ``UriParameterBinder.bind``."""

    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"

    @classmethod
    def of(cls, values: Any) -> ValueShape:
        if isinstance(values, Mapping):
            return cls.MAPPING
        if isinstance(values, (list, tuple)):
            return cls.SEQUENCE
        return cls.SCALAR


@dataclass(frozen=True)
class BindingResult:
    """Outcome of binding a mapping.

    Attributes:
        url: The resolved url (query string included when enabled).
        consumed: Keys of the input mapping that filled a placeholder.
        remaining: Keys (and values) left after placeholders were filled.
    """

    url: str
    consumed: frozenset[str] = frozenset()
    remaining: dict[str, Any] = field(default_factory=dict)


class UriParameterBinder:
    """Resolve a uri template against mappings, sequences or plain values."""

    __slots__ = ("template", "parameters", "configuration")

    def __init__(
        self,
        template: str,
        config: BinderConfiguration | Mapping[str, Any] | None = None,
        parameters: UriParameterCollection | None = None,
    ) -> None:
        self.template = template
        self.configuration: BinderConfiguration = BinderConfiguration.coerce(config)
        self.parameters = (
            parameters if parameters is not None else UriParameterCollection.parse(template)
        )

    def bind(
        self, values: Any = None, config: BinderConfiguration | Mapping[str, Any] | None = None
    ) -> str:
        """Bind ``values`` to the placeholders and return the resolved url.

        Args:
            values: Mapping, list/tuple or plain value.
            config: Optional overrides merged onto the binder configuration.

        Raises:
            UriParameterBindingError: If a value is missing, empty, cannot be
                converted, or cannot be attributed to a single placeholder.
        """
        configuration = self.configuration.merged(config)

        if not self.parameters and not configuration.bind_get_parameters:
            return self.template

        shape = ValueShape.of(values)
        if shape is ValueShape.MAPPING:
            return self._bind_mapping(values, configuration).url
        if shape is ValueShape.SEQUENCE:
            return self._bind_sequence(values, configuration)
        return self._bind_scalar(values, configuration)

    def bind_mapping(
        self,
        values: Mapping[str, Any],
        config: BinderConfiguration | Mapping[str, Any] | None = None,
    ) -> BindingResult:
        """Bind a mapping and report which keys were consumed."""
        if not isinstance(values, Mapping):
            raise TypeError(f"bind_mapping expects a mapping, got {type(values).__name__}")
        return self._bind_mapping(values, self.configuration.merged(config))

    def can_bind_object(
        self,
        values: Mapping[str, Any],
        config: BinderConfiguration | Mapping[str, Any] | None = None,
    ) -> bool:
        """Return True if ``values`` satisfies every parameter of the template.

        Only ``UriParameterBindingError`` is turned into False; any other
        error propagates.
        """
        try:
            self.bind_mapping(values, config)
        except UriParameterBindingError:
            return False
        return True

    # ------------------------------------------------------------------
    # Shape handlers
    # ------------------------------------------------------------------
    def _bind_mapping(self, values: Mapping[str, Any], config: BinderConfiguration) -> BindingResult:
        url = self.template
        remaining = dict(values)
        consumed: set[str] = set()
        for parameter in self.parameters:
            value = remaining.pop(parameter.name, _MISSING)
            if value is not _MISSING:
                consumed.add(parameter.name)
            url = self._bind_parameter(url, parameter, value, config)

        if config.bind_get_parameters:
            url = self._bind_get_parameters(url, remaining, config)

        return BindingResult(url, frozenset(consumed), remaining)

    def _bind_sequence(self, values: Sequence[Any], config: BinderConfiguration) -> str:
        url = self.template
        for index, parameter in enumerate(self.parameters):
            value = values[index] if index < len(values) else _MISSING
            url = self._bind_parameter(url, parameter, value, config)
        return url

    def _bind_scalar(self, value: Any, config: BinderConfiguration) -> str:
        required = self.parameters.get_required()
        if len(required) > 1:
            raise UriParameterBindingError(
                f"Cannot bind a given {type(value).__name__} as uri parameters: this type is "
                "handled as a plain value and can only be bound to one parameter but there "
                f"are {len(required)} required parameters."
            )
        if not self.parameters:
            if value is None:
                return self.template
            raise UriParameterBindingError(
                f"Cannot bind a given {type(value).__name__} to uri '{self.template}': "
                "it has no parameters."
            )

        target = required[0] if required else self.parameters[0]
        url = self.template
        for parameter in self.parameters:
            url = self._bind_parameter(
                url, parameter, value if parameter is target else _MISSING, config
            )
        return url

    def _bind_get_parameters(
        self, url: str, values: Mapping[str, Any], config: BinderConfiguration
    ) -> str:
        pairs: list[tuple[str, str]] = []
        for key, value in values.items():
            if value is None:
                continue
            try:
                text = self._convert_to_string(value, config)
            except TypeConversionError as error:
                raise UriParameterBindingError(
                    f"Cannot bind query parameter '{key}', unable to convert "
                    f"{type(value).__name__} to string.",
                    parameter=str(key),
                    cause=error,
                ) from error
            pairs.append((str(key), text))

        if not pairs:
            return url
        separator = "&" if "?" in url else "?"
        return url + separator + urlencode(pairs, safe=_SAFE_CHARS, quote_via=quote)

    # ------------------------------------------------------------------
    # Single parameter
    # ------------------------------------------------------------------
    def bind_parameter(
        self,
        url: str,
        parameter: str | UriParameter,
        value: Any = _MISSING,
        config: BinderConfiguration | Mapping[str, Any] | None = None,
    ) -> str:
        """Bind one value into ``url`` for ``parameter`` (by name or reference)."""
        return self._bind_parameter(url, parameter, value, self.configuration.merged(config))

    def _bind_parameter(
        self, url: str, parameter: str | UriParameter, value: Any, config: BinderConfiguration
    ) -> str:
        if isinstance(parameter, UriParameter):
            uri_parameter = parameter if parameter in self.parameters else None
        else:
            uri_parameter = self.parameters.get_parameter(parameter)

        if uri_parameter is None:
            raise UriParameterBindingError(
                f"Cannot bind value to non-existent parameter '{parameter}'.",
                parameter=str(parameter),
            )
        name = uri_parameter.name

        if value is _MISSING or value is None:
            if uri_parameter.required:
                raise UriParameterBindingError(
                    f"Cannot bind missing value for required parameter '{name}'.",
                    parameter=name,
                )
            value = ""

        try:
            text = self._convert_to_string(value, config)
        except TypeConversionError as error:
            raise UriParameterBindingError(
                f"Cannot bind value for parameter '{name}', unable to convert "
                f"{type(value).__name__} to string.",
                parameter=name,
                cause=error,
            ) from error

        if uri_parameter.required and not text:
            if isinstance(value, str):
                raise UriParameterBindingError(
                    f"Cannot bind empty string for required parameter '{name}'.",
                    parameter=name,
                )
            raise UriParameterBindingError(
                f"Cannot bind given {type(value).__name__} value for required parameter "
                f"'{name}' because string conversion results in an empty string.",
                parameter=name,
            )

        url = url.replace(uri_parameter.placeholder, quote(text, safe=_SAFE_CHARS), 1)
        return url.rstrip("/")

    @staticmethod
    def _convert_to_string(value: Any, config: BinderConfiguration) -> str:
        if not isinstance(value, str):
            converted = config.type_conversion_function(value)
            if converted is None:
                raise TypeConversionError(
                    f"String conversion failed for {type(value).__name__}", value
                )
            if not isinstance(converted, str):
                raise TypeConversionError(
                    f"String conversion of {type(value).__name__} returned "
                    f"{type(converted).__name__}",
                    value,
                )
            value = converted
        return value.strip()
