"""Value object describing one placeholder of a uri template."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["UriParameter"]


@dataclass(frozen=True)
class UriParameter:
    """One placeholder found while parsing a uri template.

    Attributes:
        name: Parameter name, as written between the delimiters.
        required: False when the token carries the optional marker (``{name?}``).
        placeholder: Exact substring of the template this parameter replaces.
    """

    name: str
    required: bool
    placeholder: str

    def __str__(self) -> str:
        return self.placeholder
