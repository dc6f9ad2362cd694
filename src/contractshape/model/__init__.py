# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type-schema model: named scalar, enum and object types and field type references."""

from contractshape.model.definitions import (
    EnumTypeDef,
    ObjectTypeDef,
    ScalarTypeDef,
    TypeDefinition,
    TypeSchema,
)
from contractshape.model.types import (
    FieldDef,
    ListTypeRef,
    NamedTypeRef,
    OptionalTypeRef,
    TypeRef,
)

__all__ = [
    # Type references
    "NamedTypeRef",
    "ListTypeRef",
    "OptionalTypeRef",
    "TypeRef",
    "FieldDef",
    # Definitions
    "ScalarTypeDef",
    "EnumTypeDef",
    "ObjectTypeDef",
    "TypeDefinition",
    "TypeSchema",
]
