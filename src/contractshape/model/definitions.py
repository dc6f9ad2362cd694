# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Named type definitions and the type schema that groups them."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

from contractshape.model.types import FieldDef

# ###############
# Public Interface
# ###############


class ScalarTypeDef(BaseModel):
    """A named scalar type.

    ``origin`` is the descriptor the definition was derived from.  It is not
    serialized; stitching uses it to tell two same-named scalars apart.
    """

    kind: Literal["scalar"] = "scalar"
    name: str
    description: str | None = None
    origin: Any = _Field(default=None, exclude=True, repr=False)


class EnumTypeDef(BaseModel):
    """A named, closed enumeration type."""

    kind: Literal["enum"] = "enum"
    name: str
    values: list[str] = _Field(default_factory=list)
    description: str | None = None


class ObjectTypeDef(BaseModel):
    """A named composite type whose fields mirror a model descriptor."""

    kind: Literal["object"] = "object"
    name: str
    fields: list[FieldDef] = _Field(default_factory=list)
    description: str | None = None

    def field(self, name: str) -> FieldDef:
        """Return the field called *name*.

        Raises:
            KeyError: If the type has no such field.
        """
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f"Type '{self.name}' has no field '{name}'")


TypeDefinition = Annotated[
    ScalarTypeDef | EnumTypeDef | ObjectTypeDef,
    _Field(discriminator="kind"),
]


class TypeSchema(BaseModel):
    """A set of named type definitions rooted at one object type.

    Definitions are listed root first, then in the order they were reached.
    Every name referenced by a field resolves to exactly one definition.
    """

    root: str
    types: list[TypeDefinition] = _Field(default_factory=list)

    @property
    def root_type(self) -> ObjectTypeDef:
        root = self.get(self.root)
        assert isinstance(root, ObjectTypeDef)
        return root

    @property
    def names(self) -> list[str]:
        return [t.name for t in self.types]

    def get(self, name: str) -> ScalarTypeDef | EnumTypeDef | ObjectTypeDef:
        """Return the definition called *name*.

        Raises:
            KeyError: If no such definition exists.
        """
        for definition in self.types:
            if definition.name == name:
                return definition
        raise KeyError(f"Type schema '{self.root}' has no type '{name}'")

    def merge(self, *others: TypeSchema) -> TypeSchema:
        """Stitch *others* into this schema.  See :func:`contractshape.compiler.type_schema.merge_type_schemas`."""
        from contractshape.compiler.type_schema import merge_type_schemas

        return merge_type_schemas(self, *others)

    def __contains__(self, name: object) -> bool:
        return any(t.name == name for t in self.types)
