# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Validator derivation.

Each model descriptor is compiled into a concrete pydantic model class, built
with :func:`pydantic.create_model`.  Leaf descriptors become plain validators
around their ``validate`` operation; array slots become lists guarded against
non-list input; optional slots become nullable fields defaulting to ``None``.

Validation never stops at the first problem: pydantic collects every error
in one pass, and each one is reported as a :class:`Violation` carrying the
path of the offending field.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Annotated, Any, ForwardRef, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainValidator, create_model
from pydantic import Field as _Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from contractshape.compiler.context import CompilationContext, resolve_context
from contractshape.config import CompilerConfig
from contractshape.descriptors.enum import UnknownEnumValueError
from contractshape.descriptors.model import Descriptor, FieldSlot, ModelDescriptor
from contractshape.descriptors.scalar import ScalarViolation

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class ViolationKind(str, enum.Enum):
    """Classification of a validation failure."""

    DOMAIN_VIOLATION = "domain_violation"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    SHAPE_MISMATCH = "shape_mismatch"
    UNKNOWN_ENUM_VALUE = "unknown_enum_value"
    UNEXPECTED_FIELD = "unexpected_field"


@dataclass(frozen=True)
class Violation:
    """One problem found in an input value.

    Attributes:
        kind: What went wrong.
        path: Keys and list indices leading to the offending value; empty for
            the input as a whole.
        message: Human-readable description.
    """

    kind: ViolationKind
    path: tuple[str | int, ...]
    message: str

    @property
    def location(self) -> str:
        """The path rendered as ``items[0].name``."""
        return format_path(self.path)


class ContractValidationError(Exception):
    """Raised by :meth:`ModelValidator.parse` when the input has violations.

    Attributes:
        model_name: Name of the model the input was validated against.
        violations: Every violation found, never empty.
    """

    def __init__(self, model_name: str, violations: tuple[Violation, ...]) -> None:
        self.model_name = model_name
        self.violations = violations
        lines = "\n".join(f"  {v.location}: {v.message}" for v in violations)
        super().__init__(f"{len(violations)} violation(s) for '{model_name}':\n{lines}")


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one input: either a value or a non-empty list of violations.

    Attributes:
        value: The validated value (a plain dict keyed by field name) when
            there are no violations, else ``None``.
        violations: Every violation found.
    """

    value: dict[str, Any] | None = None
    violations: tuple[Violation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations


class ModelValidator:
    """The validator derived from a :class:`ModelDescriptor`.

    Validated values are plain dicts holding every present declared field
    (typed by its descriptor) plus, unless forbidden, any unrecognized input
    fields unchanged.  Absent optional fields stay absent.
    """

    def __init__(self, descriptor: ModelDescriptor, model: type[BaseModel]) -> None:
        self._descriptor = descriptor
        self._model = model

    @property
    def descriptor(self) -> ModelDescriptor:
        return self._descriptor

    @property
    def model(self) -> type[BaseModel]:
        """The generated pydantic model class."""
        return self._model

    def validate(self, data: Any) -> ValidationOutcome:
        """Validate *data*, collecting every violation."""
        try:
            instance = self._model.model_validate(data)
        except PydanticValidationError as exc:
            return ValidationOutcome(violations=tuple(_to_violation(error) for error in exc.errors()))
        return ValidationOutcome(value=_dump(instance))

    def parse(self, data: Any) -> dict[str, Any]:
        """Return the validated value for *data*.

        Raises:
            ContractValidationError: If *data* has any violation.
        """
        outcome = self.validate(data)
        if not outcome.ok:
            raise ContractValidationError(self._descriptor.name, outcome.violations)
        assert outcome.value is not None
        return outcome.value

    def is_valid(self, data: Any) -> bool:
        return self.validate(data).ok

    def __repr__(self) -> str:
        return f"ModelValidator(model={self._descriptor.name!r})"


def derive_validator(descriptor: ModelDescriptor, context: CompilationContext | None = None) -> ModelValidator:
    """Derive the validator of *descriptor*.

    Nested models are compiled once per call and shared by every slot that
    references them; a model reached again while its own fields are still
    being compiled (a recursive reference) is linked by forward reference.
    Nothing is cached across calls.

    Args:
        descriptor: The model to derive a validator for.
        context: Compilation context; only its configuration is used here.

    Returns:
        A :class:`ModelValidator`.
    """
    ctx = resolve_context(context)
    model = _ValidatorBuilder(ctx.config).build(descriptor)
    logger.debug("Derived validator for model '%s'", descriptor.name)
    return ModelValidator(descriptor, model)


def format_path(path: tuple[str | int, ...]) -> str:
    """Render a violation path as ``items[0].name``; the empty path renders as ``<root>``."""
    if not path:
        return "<root>"
    rendered = ""
    for part in path:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}" if rendered else str(part)
    return rendered


# ################
# Implementation
# ################

_KIND_BY_ERROR_TYPE = {
    "missing": ViolationKind.MISSING_REQUIRED_FIELD,
    "domain_violation": ViolationKind.DOMAIN_VIOLATION,
    "unknown_enum_value": ViolationKind.UNKNOWN_ENUM_VALUE,
    "extra_forbidden": ViolationKind.UNEXPECTED_FIELD,
}


class _ValidatorBuilder:
    """Compiles one model graph into pydantic model classes."""

    def __init__(self, config: CompilerConfig) -> None:
        self._config = config
        self._models: dict[int, type[BaseModel]] = {}
        self._ref_names: dict[int, str] = {}
        self._in_progress: set[int] = set()
        self._namespace: dict[str, type[BaseModel]] = {}

    def build(self, descriptor: ModelDescriptor) -> type[BaseModel]:
        root = self._model_for(descriptor)
        # Models that closed a cycle were created with unresolved forward
        # references; resolve them now that every class exists.
        for model in reversed(list(self._models.values())):
            if not model.__pydantic_complete__:
                model.model_rebuild(raise_errors=True, _types_namespace=self._namespace)
        return root

    def _model_for(self, descriptor: ModelDescriptor) -> type[BaseModel]:
        key = id(descriptor)
        if key in self._models:
            return self._models[key]
        ref_name = f"_Model{len(self._ref_names)}"
        self._ref_names[key] = ref_name
        self._in_progress.add(key)
        try:
            definitions: dict[str, Any] = {
                f"f{index}": self._field_definition(name, slot)
                for index, (name, slot) in enumerate(descriptor.fields.items())
            }
            model = create_model(
                descriptor.name,
                __config__=ConfigDict(extra=self._config.extra_fields),
                __doc__=descriptor.description,
                **definitions,
            )
        finally:
            self._in_progress.discard(key)
        self._models[key] = model
        self._namespace[ref_name] = model
        return model

    def _field_definition(self, name: str, slot: FieldSlot) -> tuple[Any, Any]:
        annotation = self._annotation_for(slot.descriptor)
        if slot.array:
            annotation = Annotated[list[annotation], BeforeValidator(_require_list)]
        if slot.optional:
            return (Optional[annotation], _Field(default=None, alias=name, description=slot.description))
        return (annotation, _Field(alias=name, description=slot.description))

    def _annotation_for(self, descriptor: Descriptor) -> Any:
        if isinstance(descriptor, ModelDescriptor):
            key = id(descriptor)
            if key in self._in_progress:
                return ForwardRef(self._ref_names[key])
            return self._model_for(descriptor)
        return Annotated[Any, PlainValidator(_leaf_validator(descriptor))]


def _leaf_validator(descriptor: Descriptor) -> Any:
    def check(value: Any) -> Any:
        try:
            return descriptor.validate(value)
        except UnknownEnumValueError as exc:
            raise PydanticCustomError("unknown_enum_value", "{reason}", {"reason": str(exc)}) from exc
        except ScalarViolation as exc:
            raise PydanticCustomError("domain_violation", "{reason}", {"reason": str(exc)}) from exc

    return check


def _require_list(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        raise PydanticCustomError(
            "shape_mismatch",
            "expected an array, got {type_name}",
            {"type_name": type(value).__name__},
        )
    return list(value)


def _to_violation(error: Any) -> Violation:
    kind = _KIND_BY_ERROR_TYPE.get(error["type"], ViolationKind.SHAPE_MISMATCH)
    path = tuple(error["loc"])
    if kind is ViolationKind.MISSING_REQUIRED_FIELD:
        message = "missing required field"
    elif kind is ViolationKind.UNEXPECTED_FIELD:
        message = "unexpected field"
    else:
        message = error["msg"]
    return Violation(kind=kind, path=path, message=message)


def _dump(value: Any) -> Any:
    """Convert a validated model instance back into plain data keyed by field name."""
    if isinstance(value, BaseModel):
        fields = type(value).model_fields
        data: dict[str, Any] = {
            info.alias or name: _dump(getattr(value, name))
            for name, info in fields.items()
            if name in value.model_fields_set
        }
        data.update(value.model_extra or {})
        return data
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value
