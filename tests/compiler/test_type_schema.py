# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for type-schema derivation, stitching and SDL rendering."""

import pytest

from contractshape.compiler import (
    CompilationContext,
    TypeSchemaConflictError,
    derive_type_schema,
    merge_type_schemas,
    print_sdl,
)
from contractshape.config import CompilerConfig
from contractshape.descriptors import ModelDescriptor, ScalarDescriptor, declare, enum_descriptor, field, from_json_schema
from contractshape.model import EnumTypeDef, ListTypeRef, NamedTypeRef, ObjectTypeDef, OptionalTypeRef, ScalarTypeDef
from contractshape.scalars import ScalarRegistry

# ###############
# Test Helpers
# ###############


def _context(**config: object) -> CompilationContext:
    return CompilationContext(registry=ScalarRegistry(), config=CompilerConfig(**config))  # type: ignore[arg-type]


def _post_model(ctx: CompilationContext) -> ModelDescriptor:
    s = ctx.scalars
    kind = enum_descriptor("TagKind", ["A", "B"])
    tag = declare("Tag", {"label": s.non_empty_string(), "kind": kind})
    return declare(
        "Post",
        {
            "title": s.non_empty_string(),
            "tags": field(tag, optional=True, array=True),
            "id": s.id(),
        },
    )


# ###############
# Derivation
# ###############


class TestDerive:
    def test_root_first_then_reachable_in_order(self) -> None:
        ctx = _context()
        schema = derive_type_schema(_post_model(ctx), ctx)
        assert schema.root == "Post"
        assert schema.names == ["Post", "NonEmptyString", "Tag", "TagKind", "ID"]

    def test_field_types_mirror_slots(self) -> None:
        ctx = _context()
        s = ctx.scalars
        model = declare(
            "Item",
            {
                "a": s.id(),
                "b": field(s.id(), optional=True),
                "c": field(s.id(), array=True),
                "d": field(s.id(), optional=True, array=True),
            },
        )
        root = derive_type_schema(model, ctx).root_type
        assert root.field("a").type == NamedTypeRef(name="ID")
        assert root.field("b").type == OptionalTypeRef(inner_type=NamedTypeRef(name="ID"))
        assert root.field("c").type == ListTypeRef(element_type=NamedTypeRef(name="ID"))
        assert root.field("d").type == OptionalTypeRef(inner_type=ListTypeRef(element_type=NamedTypeRef(name="ID")))

    def test_enum_definition(self) -> None:
        ctx = _context()
        enum_def = derive_type_schema(_post_model(ctx), ctx).get("TagKind")
        assert enum_def == EnumTypeDef(name="TagKind", values=["A", "B"])

    def test_enum_duplicates_collapsed(self) -> None:
        ctx = _context()
        model = declare("M", {"e": enum_descriptor("E", ["X", "Y", "X"])})
        enum_def = derive_type_schema(model, ctx).get("E")
        assert isinstance(enum_def, EnumTypeDef)
        assert enum_def.values == ["X", "Y"]

    def test_scalar_definition_keeps_origin(self) -> None:
        ctx = _context()
        scalar_def = derive_type_schema(_post_model(ctx), ctx).get("NonEmptyString")
        assert isinstance(scalar_def, ScalarTypeDef)
        assert scalar_def.origin is ctx.scalars.non_empty_string()

    def test_shared_model_defined_once(self) -> None:
        ctx = _context()
        s = ctx.scalars
        address = declare("Address", {"city": s.string_unsecure()})
        person = declare("Person", {"home": address, "work": field(address, optional=True)})
        assert derive_type_schema(person, ctx).names == ["Person", "Address", "String_unsecure"]

    def test_recursive_model_refers_by_name(self) -> None:
        ctx = _context()
        s = ctx.scalars
        node: ModelDescriptor = declare(
            "Node",
            lambda: {"label": s.string_unsecure(), "children": field(node, optional=True, array=True)},
        )
        schema = derive_type_schema(node, ctx)
        assert schema.names == ["Node", "String_unsecure"]
        assert schema.root_type.field("children").type_name == "Node"

    def test_descriptions_carried(self) -> None:
        ctx = _context()
        s = ctx.scalars
        model = declare("M", {"a": field(s.id(), description="The key")}, description="A model")
        root = derive_type_schema(model, ctx).root_type
        assert root.description == "A model"
        assert root.field("a").description == "The key"

    def test_descriptions_dropped_by_config(self) -> None:
        ctx = _context(include_descriptions=False)
        s = ctx.scalars
        model = declare("M", {"a": field(s.id(), description="The key")}, description="A model")
        schema = derive_type_schema(model, ctx)
        assert schema.root_type.description is None
        assert schema.root_type.field("a").description is None
        assert schema.get("ID").description is None

    def test_unnamed_json_schema_type_maps_to_json_scalar(self) -> None:
        ctx = _context()
        model = declare("M", {"meta": from_json_schema({"type": "object"})})
        schema = derive_type_schema(model, ctx)
        assert schema.root_type.field("meta").type_name == "JSON"
        json_def = schema.get("JSON")
        assert isinstance(json_def, ScalarTypeDef)
        assert json_def.origin is ctx.scalars.json()

    def test_named_json_schema_type_is_its_own_scalar(self) -> None:
        ctx = _context()
        model = declare("M", {"meta": from_json_schema({"type": "object"}, name="Metadata")})
        assert isinstance(derive_type_schema(model, ctx).get("Metadata"), ScalarTypeDef)

    def test_descriptor_method_matches_function(self) -> None:
        ctx = _context()
        model = _post_model(ctx)
        assert model.derive_type_schema(ctx) == derive_type_schema(model, ctx)


class TestConflicts:
    def test_two_scalar_instances_with_one_name(self) -> None:
        ctx = _context()
        money_a = ScalarDescriptor(name="Money", validator=lambda v: v)
        money_b = ScalarDescriptor(name="Money", validator=lambda v: v)
        model = declare("M", {"a": money_a, "b": money_b})
        with pytest.raises(TypeSchemaConflictError) as exc_info:
            derive_type_schema(model, ctx)
        assert exc_info.value.name == "Money"

    def test_enums_with_same_values_reconcile(self) -> None:
        ctx = _context()
        model = declare("M", {"a": enum_descriptor("E", ["X"]), "b": enum_descriptor("E", ["X"])})
        assert derive_type_schema(model, ctx).names == ["M", "E"]

    def test_enums_with_different_values_conflict(self) -> None:
        ctx = _context()
        model = declare("M", {"a": enum_descriptor("E", ["X"]), "b": enum_descriptor("E", ["Y"])})
        with pytest.raises(TypeSchemaConflictError, match="different values"):
            derive_type_schema(model, ctx)

    def test_model_and_scalar_sharing_a_name(self) -> None:
        ctx = _context()
        clash = declare("ID", {"value": ctx.scalars.string_unsecure()})
        model = declare("M", {"a": ctx.scalars.id(), "b": clash})
        with pytest.raises(TypeSchemaConflictError):
            derive_type_schema(model, ctx)


# ###############
# Stitching
# ###############


class TestMerge:
    def test_shared_registry_schemas_merge(self) -> None:
        ctx = _context()
        s = ctx.scalars
        user = declare("User", {"id": s.id(), "email": s.email_address()})
        order = declare("Order", {"id": s.id(), "buyer": user})
        merged = merge_type_schemas(derive_type_schema(user, ctx), derive_type_schema(order, ctx))
        assert merged.root == "User"
        assert merged.names == ["User", "ID", "EmailAddress", "Order"]

    def test_scalars_from_different_registries_conflict(self) -> None:
        ctx_a = _context()
        ctx_b = _context()
        a = declare("A", {"when": ctx_a.scalars.date()})
        b = declare("B", {"when": ctx_b.scalars.date()})
        with pytest.raises(TypeSchemaConflictError, match="different descriptor instances"):
            merge_type_schemas(derive_type_schema(a, ctx_a), derive_type_schema(b, ctx_b))

    def test_enum_instances_with_equal_values_merge(self) -> None:
        ctx = _context()
        a = declare("A", {"e": enum_descriptor("E", ["X", "Y"])})
        b = declare("B", {"e": enum_descriptor("E", ["X", "Y"])})
        merged = merge_type_schemas(derive_type_schema(a, ctx), derive_type_schema(b, ctx))
        assert merged.names == ["A", "E", "B"]

    def test_enum_values_conflict(self) -> None:
        ctx = _context()
        a = declare("A", {"e": enum_descriptor("E", ["X"])})
        b = declare("B", {"e": enum_descriptor("E", ["X", "Y"])})
        with pytest.raises(TypeSchemaConflictError):
            merge_type_schemas(derive_type_schema(a, ctx), derive_type_schema(b, ctx))

    def test_object_types_must_match(self) -> None:
        ctx = _context()
        s = ctx.scalars
        a = declare("A", {"shared": declare("Shared", {"x": s.id()})})
        b = declare("B", {"shared": declare("Shared", {"y": s.id()})})
        with pytest.raises(TypeSchemaConflictError, match="object types differ"):
            merge_type_schemas(derive_type_schema(a, ctx), derive_type_schema(b, ctx))

    def test_kind_mismatch(self) -> None:
        ctx = _context()
        a = declare("A", {"x": enum_descriptor("Thing", ["X"])})
        b = declare("B", {"x": declare("Thing", {})})
        with pytest.raises(TypeSchemaConflictError, match="enum vs object"):
            merge_type_schemas(derive_type_schema(a, ctx), derive_type_schema(b, ctx))

    def test_merge_method(self) -> None:
        ctx = _context()
        a = declare("A", {"id": ctx.scalars.id()})
        b = declare("B", {"id": ctx.scalars.id()})
        merged = derive_type_schema(a, ctx).merge(derive_type_schema(b, ctx))
        assert merged.root == "A"
        assert merged.names == ["A", "ID", "B"]

    def test_merge_requires_a_schema(self) -> None:
        with pytest.raises(ValueError):
            merge_type_schemas()


# ###############
# SDL
# ###############


def test_print_sdl() -> None:
    ctx = _context()
    expected = """\
type Post {
  title: NonEmptyString!
  tags: [Tag!]
  id: ID!
}

scalar NonEmptyString

type Tag {
  label: NonEmptyString!
  kind: TagKind!
}

enum TagKind {
  A
  B
}
"""
    assert print_sdl(derive_type_schema(_post_model(ctx), ctx)) == expected


def test_print_sdl_descriptions() -> None:
    ctx = _context()
    model = declare(
        "Account",
        {"code": field(ctx.scalars.currency(), description="Billing currency")},
        description="A billing account",
    )
    assert print_sdl(derive_type_schema(model, ctx)) == (
        '"""A billing account"""\n'
        "type Account {\n"
        '  """Billing currency"""\n'
        "  code: Currency!\n"
        "}\n"
        "\n"
        '"""ISO 4217 currency code"""\n'
        "scalar Currency\n"
    )


def test_object_definition_fields() -> None:
    ctx = _context()
    tag = derive_type_schema(_post_model(ctx), ctx).get("Tag")
    assert isinstance(tag, ObjectTypeDef)
    assert [f.name for f in tag.fields] == ["label", "kind"]
