# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Derivations from model descriptors: validators, type schemas and JSON-Schema."""

from contractshape.compiler.build import CompiledModel, CompilerError, compile_models
from contractshape.compiler.context import CompilationContext
from contractshape.compiler.json_schema import derive_json_schema
from contractshape.compiler.type_schema import (
    TypeSchemaConflictError,
    derive_type_schema,
    merge_type_schemas,
    print_sdl,
)
from contractshape.compiler.validator import (
    ContractValidationError,
    ModelValidator,
    ValidationOutcome,
    Violation,
    ViolationKind,
    derive_validator,
)

__all__ = [
    "CompilationContext",
    "derive_validator",
    "ModelValidator",
    "ValidationOutcome",
    "Violation",
    "ViolationKind",
    "ContractValidationError",
    "derive_type_schema",
    "merge_type_schemas",
    "print_sdl",
    "TypeSchemaConflictError",
    "derive_json_schema",
    "compile_models",
    "CompiledModel",
    "CompilerError",
]
