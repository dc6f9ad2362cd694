# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type-schema derivation, stitching and SDL rendering.

The type schema is the structural, GraphQL-like representation consumers
stitch into larger schemas.  Every scalar, enum and object is a *named*
definition; fields refer to them by name, so recursive and shared models
need no special treatment.
"""

from __future__ import annotations

import logging

from contractshape.compiler.context import CompilationContext, resolve_context
from contractshape.descriptors.enum import EnumDescriptor
from contractshape.descriptors.json_schema_type import JSON_TYPE_NAME, JsonSchemaDescriptor
from contractshape.descriptors.model import Descriptor, FieldSlot, ModelDescriptor
from contractshape.descriptors.scalar import ScalarDescriptor
from contractshape.model.definitions import EnumTypeDef, ObjectTypeDef, ScalarTypeDef, TypeDefinition, TypeSchema
from contractshape.model.types import FieldDef, ListTypeRef, NamedTypeRef, OptionalTypeRef, TypeRef

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# Scalars every GraphQL schema already defines.
GRAPHQL_BUILTIN_SCALARS = frozenset({"String", "Int", "Float", "Boolean", "ID"})


class TypeSchemaConflictError(Exception):
    """Raised when two different definitions claim the same type name."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Conflicting definitions for type '{name}': {reason}")
        self.name = name
        self.reason = reason


def derive_type_schema(descriptor: ModelDescriptor, context: CompilationContext | None = None) -> TypeSchema:
    """Derive the type schema of *descriptor*.

    The result holds the root object type followed by every scalar, enum and
    object type reachable from it.  Each field's type mirrors its slot: a
    list slot becomes a :class:`ListTypeRef` of non-null elements, an optional
    slot is wrapped in an :class:`OptionalTypeRef`.

    Args:
        descriptor: The root model.
        context: Compilation context supplying the scalar registry (for the
            shared ``JSON`` scalar) and the description policy.

    Returns:
        The derived :class:`TypeSchema`.

    Raises:
        TypeSchemaConflictError: If two different descriptors reachable from
            *descriptor* share a name.
    """
    builder = _TypeSchemaBuilder(resolve_context(context))
    builder.add_model(descriptor)
    logger.debug("Derived type schema for model '%s' (%d types)", descriptor.name, len(builder.definitions))
    return TypeSchema(root=descriptor.name, types=list(builder.definitions.values()))


def merge_type_schemas(*schemas: TypeSchema) -> TypeSchema:
    """Stitch type schemas together by type name.

    Same-named definitions reconcile when they are the same type: scalars
    must originate from the same descriptor instance, enums must list the
    same values, objects must be structurally equal.  The result is rooted at
    the first schema's root.

    Raises:
        ValueError: If no schema is given.
        TypeSchemaConflictError: If two same-named definitions differ.
    """
    if not schemas:
        raise ValueError("merge_type_schemas() needs at least one schema")
    merged: dict[str, TypeDefinition] = {}
    for schema in schemas:
        for definition in schema.types:
            existing = merged.get(definition.name)
            if existing is None:
                merged[definition.name] = definition
            else:
                _reconcile(existing, definition)
    return TypeSchema(root=schemas[0].root, types=list(merged.values()))


def print_sdl(schema: TypeSchema) -> str:
    """Render *schema* as GraphQL SDL.

    Built-in GraphQL scalars are not re-declared.  Non-optional fields are
    non-null (``!``) and list elements are always non-null.
    """
    blocks: list[str] = []
    for definition in schema.types:
        if isinstance(definition, ScalarTypeDef) and definition.name in GRAPHQL_BUILTIN_SCALARS:
            continue
        lines = _description_lines(definition.description, indent="")
        if isinstance(definition, ScalarTypeDef):
            lines.append(f"scalar {definition.name}")
        elif isinstance(definition, EnumTypeDef):
            lines.append(f"enum {definition.name} {{")
            lines.extend(f"  {value}" for value in definition.values)
            lines.append("}")
        else:
            lines.append(f"type {definition.name} {{")
            for f in definition.fields:
                lines.extend(_description_lines(f.description, indent="  "))
                lines.append(f"  {f.name}: {render_type_ref(f.type)}")
            lines.append("}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks) + "\n"


def render_type_ref(type_ref: TypeRef) -> str:
    """Render a field type in SDL notation, e.g. ``[Tag!]`` or ``String!``."""
    if isinstance(type_ref, OptionalTypeRef):
        return _render_nullable(type_ref.inner_type)
    return _render_nullable(type_ref) + "!"


def field_type_ref(slot: FieldSlot, type_name: str) -> TypeRef:
    """Build the type reference of a field slot whose element type is *type_name*."""
    ref: TypeRef = NamedTypeRef(name=type_name)
    if slot.array:
        ref = ListTypeRef(element_type=ref)
    if slot.optional:
        ref = OptionalTypeRef(inner_type=ref)
    return ref


# ################
# Implementation
# ################


class _TypeSchemaBuilder:
    """Collects the named definitions reachable from one root model."""

    def __init__(self, context: CompilationContext) -> None:
        self._context = context
        self._include_descriptions = context.config.include_descriptions
        self.definitions: dict[str, TypeDefinition] = {}
        self._origins: dict[str, object] = {}

    def add_model(self, model: ModelDescriptor) -> str:
        if self._claim(model.name, model):
            return model.name
        # Reserve the slot first so that definitions stay root-first and a
        # recursive reference finds the name already claimed.
        self.definitions[model.name] = ObjectTypeDef(name=model.name)
        fields = [
            FieldDef(
                name=name,
                type=field_type_ref(slot, self._add(slot.descriptor)),
                description=self._describe(slot.description),
            )
            for name, slot in model.fields.items()
        ]
        self.definitions[model.name] = ObjectTypeDef(
            name=model.name, fields=fields, description=self._describe(model.description)
        )
        return model.name

    def _add(self, descriptor: Descriptor) -> str:
        if isinstance(descriptor, ModelDescriptor):
            return self.add_model(descriptor)
        if isinstance(descriptor, EnumDescriptor):
            if not self._claim(descriptor.name, descriptor):
                self.definitions[descriptor.name] = EnumTypeDef(
                    name=descriptor.name,
                    values=list(descriptor.distinct_values),
                    description=self._describe(descriptor.description),
                )
            return descriptor.name
        if isinstance(descriptor, JsonSchemaDescriptor):
            if descriptor.name is None:
                return self._add(self._context.scalars.get(JSON_TYPE_NAME))
            if not self._claim(descriptor.name, descriptor):
                self.definitions[descriptor.name] = ScalarTypeDef(name=descriptor.name, origin=descriptor)
            return descriptor.name
        assert isinstance(descriptor, ScalarDescriptor)
        if not self._claim(descriptor.name, descriptor):
            self.definitions[descriptor.name] = ScalarTypeDef(
                name=descriptor.name,
                description=self._describe(descriptor.description),
                origin=descriptor,
            )
        return descriptor.name

    def _claim(self, name: str, descriptor: object) -> bool:
        """Record *descriptor* as the owner of *name*; return True if it already was."""
        owner = self._origins.get(name)
        if owner is None:
            self._origins[name] = descriptor
            return False
        if owner is descriptor:
            return True
        if isinstance(owner, EnumDescriptor) and isinstance(descriptor, EnumDescriptor):
            if owner.distinct_values == descriptor.distinct_values:
                return True
            raise TypeSchemaConflictError(name, "enums declare different values")
        raise TypeSchemaConflictError(name, "two different descriptors share the name")

    def _describe(self, description: str | None) -> str | None:
        return description if self._include_descriptions else None


def _reconcile(existing: TypeDefinition, incoming: TypeDefinition) -> None:
    name = existing.name
    if existing.kind != incoming.kind:
        raise TypeSchemaConflictError(name, f"{existing.kind} vs {incoming.kind}")
    if isinstance(existing, ScalarTypeDef):
        assert isinstance(incoming, ScalarTypeDef)
        if existing.origin is not incoming.origin:
            raise TypeSchemaConflictError(name, "scalars come from different descriptor instances")
    elif isinstance(existing, EnumTypeDef):
        assert isinstance(incoming, EnumTypeDef)
        if existing.values != incoming.values:
            raise TypeSchemaConflictError(name, "enums declare different values")
    elif existing.model_dump() != incoming.model_dump():
        raise TypeSchemaConflictError(name, "object types differ")


def _render_nullable(type_ref: TypeRef) -> str:
    if isinstance(type_ref, NamedTypeRef):
        return type_ref.name
    if isinstance(type_ref, ListTypeRef):
        return f"[{render_type_ref(type_ref.element_type)}]"
    return _render_nullable(type_ref.inner_type)


def _description_lines(description: str | None, indent: str) -> list[str]:
    if not description:
        return []
    return [f'{indent}"""{description}"""']
