# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Composite model descriptors and the field slots they are made of."""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Union

from contractshape.descriptors.enum import EnumDescriptor
from contractshape.descriptors.json_schema_type import JsonSchemaDescriptor
from contractshape.descriptors.scalar import ScalarDescriptor

if TYPE_CHECKING:
    from contractshape.compiler.context import CompilationContext
    from contractshape.compiler.validator import ModelValidator
    from contractshape.model.definitions import TypeSchema

# ###############
# Public Interface
# ###############

# Anything that can sit in a field slot.
Descriptor = Union[ScalarDescriptor, EnumDescriptor, JsonSchemaDescriptor, "ModelDescriptor"]

FieldsSpec = Mapping[str, Union["FieldSlot", Descriptor]]


@dataclass(frozen=True)
class FieldSlot:
    """A field's descriptor together with its optional and array modifiers.

    ``optional`` and ``array`` compose independently.  Optionality always
    applies to the field as a whole: an optional array may be absent, but
    when present none of its elements may be missing.

    Attributes:
        descriptor: The element type of the field.
        optional: Whether the field may be absent.
        array: Whether the field holds a homogeneous list of *descriptor* values.
        description: Optional human-readable description of the field.
    """

    descriptor: Descriptor
    optional: bool = False
    array: bool = False
    description: str | None = None


def field(
    descriptor: Descriptor,
    *,
    optional: bool = False,
    array: bool = False,
    description: str | None = None,
) -> FieldSlot:
    """Compose *descriptor* with optional/array modifiers into a :class:`FieldSlot`."""
    return FieldSlot(descriptor=descriptor, optional=optional, array=array, description=description)


class ModelDescriptor:
    """A named, ordered mapping of field names to field slots.

    Fields may be given directly, or as a zero-argument callable returning
    the mapping.  The callable form is resolved once, on first access, and
    is how a model refers to itself or to a model declared after it::

        Node = ModelDescriptor("Node", lambda: {
            "label": scalars.string_unsecure(),
            "children": field(Node, array=True, optional=True),
        })

    Bare descriptors in the mapping are shorthand for a required, non-array
    :class:`FieldSlot`.
    """

    __slots__ = ("_name", "_description", "_fields", "_fields_source", "_lock")

    def __init__(
        self,
        name: str,
        fields: FieldsSpec | Callable[[], FieldsSpec],
        description: str | None = None,
    ) -> None:
        self._name = name
        self._description = description
        self._fields: Mapping[str, FieldSlot] | None = None
        self._fields_source = fields
        self._lock = threading.Lock()
        if not callable(fields):
            self._fields = _normalize_fields(fields)

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def fields(self) -> Mapping[str, FieldSlot]:
        """Read-only, ordered mapping of field name to :class:`FieldSlot`."""
        if self._fields is None:
            with self._lock:
                if self._fields is None:
                    source = self._fields_source
                    assert callable(source)
                    self._fields = _normalize_fields(source())
        return self._fields

    def derive_validator(self, context: CompilationContext | None = None) -> ModelValidator:
        """Build the validator for this model.  See :func:`contractshape.compiler.validator.derive_validator`."""
        from contractshape.compiler.validator import derive_validator

        return derive_validator(self, context)

    def derive_type_schema(self, context: CompilationContext | None = None) -> TypeSchema:
        """Build the type schema for this model.  See :func:`contractshape.compiler.type_schema.derive_type_schema`."""
        from contractshape.compiler.type_schema import derive_type_schema

        return derive_type_schema(self, context)

    def derive_json_schema(self, context: CompilationContext | None = None) -> dict[str, Any]:
        """Build the JSON-Schema for this model.  See :func:`contractshape.compiler.json_schema.derive_json_schema`."""
        from contractshape.compiler.json_schema import derive_json_schema

        return derive_json_schema(self, context)

    def __repr__(self) -> str:
        return f"ModelDescriptor(name={self._name!r})"


def declare(
    name: str,
    fields: FieldsSpec | Callable[[], FieldsSpec],
    description: str | None = None,
) -> ModelDescriptor:
    """Declare a model.  Pure: beyond checking that each field holds a descriptor, nothing is validated here."""
    return ModelDescriptor(name, fields, description=description)


def nested_models(model: ModelDescriptor) -> list[ModelDescriptor]:
    """Return the models directly referenced by *model*'s fields, in field order."""
    return [slot.descriptor for slot in model.fields.values() if isinstance(slot.descriptor, ModelDescriptor)]


# ################
# Implementation
# ################


_DESCRIPTOR_TYPES = (ScalarDescriptor, EnumDescriptor, JsonSchemaDescriptor, ModelDescriptor)


def _normalize_fields(fields: FieldsSpec) -> Mapping[str, FieldSlot]:
    slots: dict[str, FieldSlot] = {}
    for name, value in fields.items():
        slot = value if isinstance(value, FieldSlot) else FieldSlot(descriptor=value)
        if not isinstance(slot.descriptor, _DESCRIPTOR_TYPES):
            raise TypeError(f"Field '{name}': expected a descriptor, got {type(slot.descriptor).__name__}")
        slots[name] = slot
    return MappingProxyType(slots)
