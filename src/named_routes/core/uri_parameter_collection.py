"""Parsing of uri templates into an ordered collection of parameters.

Template grammar
----------------
A placeholder is a token delimited by ``{`` and ``}``:

- ``{name}``: required parameter
- ``{name?}``: optional parameter

Names are word characters (``[A-Za-z0-9_]``). Parsing rejects, with
``UriParameterSyntaxError``:

- empty names (``{}``, ``{?}``)
- names with other characters (``{user id}``)
- unterminated or nested delimiters (``{id``, ``{a{b}}``)
- a stray closing delimiter (``id}``)
- the same name appearing twice in one template

Parsing is a pure function of the template string; the collection is
immutable once built and keeps first-occurrence order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from typing import overload

from named_routes.exceptions import UriParameterSyntaxError

from .uri_parameter import UriParameter

__all__ = ["UriParameterCollection"]

_OPEN = "{"
_CLOSE = "}"
_OPTIONAL_MARKER = "?"
_NAME_RE = re.compile(r"\w+")


class UriParameterCollection(Sequence[UriParameter]):
    """Ordered, immutable sequence of ``UriParameter``.

    Build it with ``UriParameterCollection.parse(template)``; the constructor
    accepts already parsed parameters and enforces name uniqueness.
    """

    __slots__ = ("_parameters", "_by_name")

    def __init__(self, parameters: Iterable[UriParameter] = ()) -> None:
        items = tuple(parameters)
        by_name: dict[str, UriParameter] = {}
        for parameter in items:
            if not isinstance(parameter, UriParameter):
                raise TypeError(
                    f"UriParameterCollection items must be UriParameter, "
                    f"got {type(parameter).__name__}"
                )
            if parameter.name in by_name:
                raise ValueError(f"Duplicate uri parameter '{parameter.name}'")
            by_name[parameter.name] = parameter
        self._parameters = items
        self._by_name = by_name

    @classmethod
    def parse(cls, template: str) -> UriParameterCollection:
        """Create a collection from the placeholders found in ``template``.

        Raises:
            UriParameterSyntaxError: If a placeholder token is malformed or a
                name is repeated.
        """
        if not isinstance(template, str):
            raise TypeError(f"Uri template must be a string, got {type(template).__name__}")
        parameters: list[UriParameter] = []
        seen: set[str] = set()
        position = 0
        while True:
            start = template.find(_OPEN, position)
            segment_end = len(template) if start == -1 else start
            stray = template.find(_CLOSE, position, segment_end)
            if stray != -1:
                raise UriParameterSyntaxError(
                    f"Unexpected '{_CLOSE}' at position {stray} in uri '{template}'",
                    template,
                    stray,
                )
            if start == -1:
                break
            end = template.find(_CLOSE, start + 1)
            nested = template.find(_OPEN, start + 1, len(template) if end == -1 else end)
            if end == -1 or nested != -1:
                raise UriParameterSyntaxError(
                    f"Unterminated placeholder at position {start} in uri '{template}'",
                    template,
                    start,
                )
            parameter = cls._parse_token(template, start, end + 1)
            if parameter.name in seen:
                raise UriParameterSyntaxError(
                    f"Parameter '{parameter.name}' appears more than once in uri '{template}'",
                    template,
                    start,
                )
            seen.add(parameter.name)
            parameters.append(parameter)
            position = end + 1
        return cls(parameters)

    from_uri_string = parse

    @staticmethod
    def _parse_token(template: str, start: int, stop: int) -> UriParameter:
        placeholder = template[start:stop]
        body = placeholder[1:-1]
        required = not body.endswith(_OPTIONAL_MARKER)
        name = body if required else body[: -len(_OPTIONAL_MARKER)]
        if not name:
            raise UriParameterSyntaxError(
                f"Empty parameter name at position {start} in uri '{template}'",
                template,
                start,
            )
        if not _NAME_RE.fullmatch(name):
            raise UriParameterSyntaxError(
                f"Invalid parameter name '{name}' at position {start} in uri '{template}'",
                template,
                start,
            )
        return UriParameter(name=name, required=required, placeholder=placeholder)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------
    @overload
    def __getitem__(self, index: int) -> UriParameter: ...

    @overload
    def __getitem__(self, index: slice) -> UriParameterCollection: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return type(self)(self._parameters[index])
        return self._parameters[index]

    def __len__(self) -> int:
        return len(self._parameters)

    def __iter__(self) -> Iterator[UriParameter]:
        return iter(self._parameters)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return item in self._by_name
        return item in self._parameters

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UriParameterCollection):
            return self._parameters == other._parameters
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._parameters)

    def __repr__(self) -> str:
        return f"UriParameterCollection({list(self._parameters)!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def has_parameter(self, name: str) -> bool:
        """Return True if a parameter called ``name`` exists."""
        return name in self._by_name

    def are_required(self) -> bool:
        """Return True if any parameter is required."""
        return any(parameter.required for parameter in self._parameters)

    def get_required(self) -> UriParameterCollection:
        """Return the required parameters, in template order."""
        return type(self)(parameter for parameter in self._parameters if parameter.required)

    def get_names(self) -> list[str]:
        """Return the names of all parameters, in template order."""
        return [parameter.name for parameter in self._parameters]

    def get_parameter(self, name: str) -> UriParameter | None:
        """Return the parameter called ``name``, or None."""
        return self._by_name.get(name)
