# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Field type references for the type-schema representation."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class NamedTypeRef(BaseModel):
    """Reference to a scalar, enum or object type by name.

    A bare reference is non-null; nullability is expressed by wrapping it in
    an :class:`OptionalTypeRef`.
    """

    kind: Literal["named"] = "named"
    name: str


class ListTypeRef(BaseModel):
    """Reference to a list of *element_type*.

    List elements are never null: only the list as a whole can be optional.
    """

    kind: Literal["list"] = "list"
    element_type: TypeRef


class OptionalTypeRef(BaseModel):
    """Reference to a nullable *inner_type*."""

    kind: Literal["optional"] = "optional"
    inner_type: TypeRef


# A field type reference.
# The `kind` discriminator field enables fast, unambiguous deserialization.
TypeRef = Annotated[
    NamedTypeRef | ListTypeRef | OptionalTypeRef,
    _Field(discriminator="kind"),
]


class FieldDef(BaseModel):
    """A named, typed field of an object type."""

    name: str
    type: TypeRef
    description: str | None = None

    @property
    def is_optional(self) -> bool:
        """True if the field may be absent (null)."""
        return isinstance(self.type, OptionalTypeRef)

    @property
    def is_list(self) -> bool:
        """True if the field holds a list, optional or not."""
        inner = self.type.inner_type if isinstance(self.type, OptionalTypeRef) else self.type
        return isinstance(inner, ListTypeRef)

    @property
    def type_name(self) -> str:
        """Name of the innermost named type."""
        ref = self.type
        while not isinstance(ref, NamedTypeRef):
            ref = ref.inner_type if isinstance(ref, OptionalTypeRef) else ref.element_type
        return ref.name


# Resolve forward references for models that use TypeRef.
ListTypeRef.model_rebuild()
OptionalTypeRef.model_rebuild()
FieldDef.model_rebuild()
