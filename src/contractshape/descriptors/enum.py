# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Enum descriptors: closed, ordered sets of string values."""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from contractshape.descriptors.scalar import ScalarViolation

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class UnknownEnumValueError(ScalarViolation):
    """Raised when a value is not a member of an enum's closed value set."""


@dataclass(frozen=True, eq=False)
class EnumDescriptor:
    """A named, closed enumeration of string values.

    Duplicate values are accepted for compatibility with existing
    declarations; the first occurrence wins and derived schemas list each
    value once (see :attr:`distinct_values`).

    Attributes:
        name: Enum name.  Type schemas reconcile enums by this name.
        values: The declared values, in declaration order.
        description: Optional human-readable description.
    """

    name: str
    values: tuple[str, ...]
    description: str | None = None

    def __post_init__(self) -> None:
        values = tuple(self.values) if not isinstance(self.values, str) else (self.values,)
        if not values:
            raise ValueError(f"Enum '{self.name}' must declare at least one value")
        for value in values:
            if not isinstance(value, str):
                raise TypeError(f"Enum '{self.name}' values must be strings, got {type(value).__name__}")
        object.__setattr__(self, "values", values)
        if len(set(values)) != len(values):
            logger.warning("Enum '%s' declares duplicate values; first occurrence takes precedence", self.name)

    @property
    def distinct_values(self) -> tuple[str, ...]:
        """The declared values with duplicates removed, first occurrence first."""
        return tuple(dict.fromkeys(self.values))

    @property
    def json_schema(self) -> dict[str, Any]:
        """JSON-Schema fragment: a string restricted to the enum values."""
        return {"type": "string", "enum": list(self.distinct_values)}

    def validate(self, value: Any) -> str:
        """Return *value* if it is one of the enum values, else raise :class:`UnknownEnumValueError`."""
        if isinstance(value, str) and value in self.values:
            return value
        allowed = ", ".join(repr(v) for v in self.distinct_values)
        raise UnknownEnumValueError(self.name, f"{value!r} is not one of {allowed}")

    def parse_external(self, value: Any) -> str:
        """Like :meth:`validate`, but also accepts Python ``enum.Enum`` members by value."""
        if isinstance(value, enum.Enum):
            value = value.value
        return self.validate(value)

    def serialize(self, value: str) -> str:
        """Enum values serialize to themselves."""
        return value

    def describe(self) -> dict[str, Any]:
        """Return the JSON-Schema fragment of this enum."""
        return self.json_schema

    def __repr__(self) -> str:
        return f"EnumDescriptor(name={self.name!r}, values={list(self.values)!r})"


def enum_descriptor(name: str, values: Sequence[str], description: str | None = None) -> EnumDescriptor:
    """Declare an enum from any sequence of values."""
    return EnumDescriptor(name=name, values=tuple(values), description=description)
