# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scalar descriptors: leaf types with validate, parse, serialize and describe operations."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from contractshape.resolver import LazyJson, resolve_json_schema

# ###############
# Public Interface
# ###############


class ScalarViolation(ValueError):
    """Raised when a value falls outside a scalar's domain.

    Attributes:
        scalar: Name of the scalar that rejected the value.
        reason: Human-readable description of the violated constraint.
    """

    def __init__(self, scalar: str, reason: str) -> None:
        super().__init__(f"{scalar}: {reason}")
        self.scalar = scalar
        self.reason = reason


@dataclass(frozen=True, eq=False)
class ScalarDescriptor:
    """A primitive or custom scalar type.

    Two descriptors are only ever considered the same scalar when they are the
    same object; see :class:`~contractshape.scalars.registry.ScalarRegistry`
    for how a single instance per name is obtained.

    Attributes:
        name: Logical name, also used as the type-schema scalar name.
        validator: Strict check returning the typed value for in-domain input.
            It may raise :class:`ScalarViolation`, ``ValueError`` or
            ``TypeError``; the latter two are reported as violations.
        parser: Lenient conversion of external input into the typed value.
            Defaults to *validator*.
        serializer: Conversion of a typed value back to its external form.
            Defaults to the identity.
        json_schema: JSON-Schema fragment, or a zero-argument producer of one.
        description: Optional human-readable description.
    """

    name: str
    validator: Callable[[Any], Any]
    parser: Callable[[Any], Any] | None = None
    serializer: Callable[[Any], Any] | None = None
    json_schema: LazyJson = field(default_factory=dict)
    description: str | None = None

    def validate(self, value: Any) -> Any:
        """Return the typed value for *value* or raise :class:`ScalarViolation`."""
        return self._run(self.validator, value)

    def parse_external(self, value: Any) -> Any:
        """Leniently convert external input into the typed value."""
        return self._run(self.parser or self.validator, value)

    def serialize(self, value: Any) -> Any:
        """Convert a typed value into its external representation."""
        if self.serializer is None:
            return value
        return self.serializer(value)

    def describe(self) -> dict[str, Any]:
        """Return the fully resolved JSON-Schema fragment of this scalar."""
        return resolve_json_schema(self.json_schema)

    def __repr__(self) -> str:
        return f"ScalarDescriptor(name={self.name!r})"

    def _run(self, fn: Callable[[Any], Any], value: Any) -> Any:
        try:
            return fn(value)
        except ScalarViolation:
            raise
        except (ValueError, TypeError) as exc:
            raise ScalarViolation(self.name, str(exc)) from exc
