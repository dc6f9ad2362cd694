# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Leaf descriptors backed by a hand-written JSON-Schema document.

Used where a contract already owns a JSON-Schema (e.g. a metadata blob) and
only needs it carried through validation and export unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import jsonschema
from jsonschema.exceptions import best_match

from contractshape.descriptors.scalar import ScalarViolation
from contractshape.resolver import resolve_json_schema

# ###############
# Public Interface
# ###############

JSON_TYPE_NAME = "JSON"


@dataclass(frozen=True, eq=False)
class JsonSchemaDescriptor:
    """A leaf descriptor whose domain is defined by a JSON-Schema document.

    Values are checked against the document with a Draft 2020-12 validator,
    ``format`` included.  An empty schema accepts any mapping.

    Attributes:
        schema: The JSON-Schema document (may contain lazy fragments).
        name: Optional type name.  Unnamed descriptors map to the ``JSON``
            scalar in type schemas.
    """

    schema: Mapping[str, Any]
    name: str | None = None

    @property
    def type_name(self) -> str:
        """Name used for this descriptor in type schemas."""
        return self.name or JSON_TYPE_NAME

    @property
    def json_schema(self) -> dict[str, Any]:
        """The wrapped document, resolved."""
        return resolve_json_schema(self.schema)

    def validate(self, value: Any) -> Any:
        """Return *value* if it satisfies the schema, else raise :class:`ScalarViolation`.

        Raises:
            ScalarViolation: If *value* does not satisfy the document.
            jsonschema.exceptions.SchemaError: If the document itself is not a
                valid JSON-Schema.
        """
        schema = self.json_schema
        if not schema:
            if not isinstance(value, Mapping):
                raise ScalarViolation(self.type_name, f"expected an object, got {type(value).__name__}")
            return value
        jsonschema.Draft202012Validator.check_schema(schema)
        validator = jsonschema.Draft202012Validator(schema, format_checker=jsonschema.FormatChecker())
        error = best_match(validator.iter_errors(value))
        if error is not None:
            raise ScalarViolation(self.type_name, f"{_render_path(error.absolute_path)}: {error.message}")
        return value

    def parse_external(self, value: Any) -> Any:
        return self.validate(value)

    def serialize(self, value: Any) -> Any:
        return value

    def describe(self) -> dict[str, Any]:
        return self.json_schema

    def __repr__(self) -> str:
        return f"JsonSchemaDescriptor(name={self.name!r})"


def from_json_schema(schema: Mapping[str, Any], *, name: str | None = None) -> JsonSchemaDescriptor:
    """Wrap an existing JSON-Schema document as a leaf descriptor."""
    return JsonSchemaDescriptor(schema=schema, name=name)


# ################
# Implementation
# ################


def _render_path(path: Iterable[str | int]) -> str:
    """Render an error location as ``$.labels[1]``."""
    rendered = "$"
    for part in path:
        rendered += f"[{part}]" if isinstance(part, int) else f".{part}"
    return rendered
