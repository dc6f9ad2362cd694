# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""JSON-Schema derivation.

Nested models are inlined.  A model that is reached again while it is being
inlined (a recursive reference) becomes a ``$ref`` instead: ``#`` for the
root model, ``#/$defs/<Name>`` for any other model, whose definition is then
emitted once under ``$defs``.  Two distinct recursive models with the same
name cannot share a ``$defs`` entry and raise
:class:`~contractshape.compiler.type_schema.TypeSchemaConflictError`.
"""

from __future__ import annotations

import logging
from typing import Any

from contractshape.compiler.context import CompilationContext, resolve_context
from contractshape.compiler.type_schema import TypeSchemaConflictError
from contractshape.descriptors.enum import EnumDescriptor
from contractshape.descriptors.model import Descriptor, FieldSlot, ModelDescriptor
from contractshape.resolver import resolve_json_schema

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

DEFS_KEY = "$defs"


def derive_json_schema(descriptor: ModelDescriptor, context: CompilationContext | None = None) -> dict[str, Any]:
    """Derive the JSON-Schema document of *descriptor*.

    The document is ``{"type": "object", "properties": {...}, "required":
    [...]}`` where ``required`` lists the non-optional fields in declaration
    order.  Array slots become ``{"type": "array", "items": <element>}``;
    optionality is expressed only by leaving a field out of ``required``.

    Lazy fragments of leaf descriptors are resolved, so the result is plain
    JSON.  Each call builds a fresh document.

    Args:
        descriptor: The root model.
        context: Compilation context supplying the description policy and
            the optional ``$schema`` dialect.

    Returns:
        The JSON-Schema document as a dict.

    Raises:
        TypeSchemaConflictError: If two different recursive models would
            share one ``$defs`` name.
    """
    ctx = resolve_context(context)
    builder = _JsonSchemaBuilder(descriptor, ctx.config.include_descriptions)
    document: dict[str, Any] = {}
    if ctx.config.json_schema_dialect:
        document["$schema"] = ctx.config.json_schema_dialect
    document.update(builder.object_schema(descriptor, stack=[descriptor]))
    definitions = builder.definitions()
    if definitions:
        document[DEFS_KEY] = definitions
    logger.debug("Derived JSON-Schema for model '%s'", descriptor.name)
    return document


def slot_schema(slot: FieldSlot, element: dict[str, Any]) -> dict[str, Any]:
    """Wrap the element schema of a field slot in its array modifier, if any."""
    if slot.array:
        return {"type": "array", "items": element}
    return element


# ################
# Implementation
# ################


class _JsonSchemaBuilder:
    def __init__(self, root: ModelDescriptor, include_descriptions: bool) -> None:
        self._root = root
        self._include_descriptions = include_descriptions
        # Models that must be emitted under $defs, in the order first referenced.
        self._pending: dict[str, ModelDescriptor] = {}

    def object_schema(self, model: ModelDescriptor, stack: list[ModelDescriptor]) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        required: list[str] = []
        for name, slot in model.fields.items():
            prop = slot_schema(slot, self._element_schema(slot.descriptor, stack))
            if self._include_descriptions and slot.description:
                prop = {**prop, "description": slot.description}
            properties[name] = prop
            if not slot.optional:
                required.append(name)
        schema: dict[str, Any] = {"type": "object"}
        if self._include_descriptions and model.description:
            schema["description"] = model.description
        schema["properties"] = properties
        schema["required"] = required
        return schema

    def definitions(self) -> dict[str, Any]:
        """Emit every pending ``$defs`` entry; emitting one may queue more."""
        emitted: dict[str, Any] = {}
        while len(emitted) < len(self._pending):
            name, model = next((n, m) for n, m in self._pending.items() if n not in emitted)
            emitted[name] = self.object_schema(model, stack=[self._root, model])
        return emitted

    def _element_schema(self, descriptor: Descriptor, stack: list[ModelDescriptor]) -> dict[str, Any]:
        if isinstance(descriptor, ModelDescriptor):
            if descriptor is self._root:
                return {"$ref": "#"}
            if any(descriptor is m for m in stack):
                queued = self._pending.setdefault(descriptor.name, descriptor)
                if queued is not descriptor:
                    raise TypeSchemaConflictError(descriptor.name, "two different recursive models share the name")
                return {"$ref": f"#/{DEFS_KEY}/{descriptor.name}"}
            return self.object_schema(descriptor, stack=[*stack, descriptor])
        schema = resolve_json_schema(descriptor.json_schema)
        # Scalar descriptions document the scalar, not the field; only enums carry theirs.
        if isinstance(descriptor, EnumDescriptor) and self._include_descriptions and descriptor.description:
            schema.setdefault("description", descriptor.description)
        return schema
