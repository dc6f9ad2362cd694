# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Descriptor model: scalars, enums, JSON-Schema leaves and composite models."""

from contractshape.descriptors.enum import EnumDescriptor, UnknownEnumValueError, enum_descriptor
from contractshape.descriptors.json_schema_type import JsonSchemaDescriptor, from_json_schema
from contractshape.descriptors.model import (
    Descriptor,
    FieldSlot,
    ModelDescriptor,
    declare,
    field,
    nested_models,
)
from contractshape.descriptors.scalar import ScalarDescriptor, ScalarViolation

__all__ = [
    # Leaves
    "ScalarDescriptor",
    "ScalarViolation",
    "EnumDescriptor",
    "UnknownEnumValueError",
    "enum_descriptor",
    "JsonSchemaDescriptor",
    "from_json_schema",
    # Composition
    "Descriptor",
    "FieldSlot",
    "field",
    "ModelDescriptor",
    "declare",
    "nested_models",
]
