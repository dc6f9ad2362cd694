# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compile a set of models into all three derived artifacts at once.

The declaration checks run first over the whole graph; any error aborts the
compilation before a single artifact is derived, so consumers never see a
validator whose type schema could not have been stitched.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from contractshape.compiler.context import CompilationContext, resolve_context
from contractshape.compiler.json_schema import derive_json_schema
from contractshape.compiler.type_schema import derive_type_schema
from contractshape.compiler.validator import ModelValidator, derive_validator
from contractshape.descriptors.model import ModelDescriptor
from contractshape.model.definitions import TypeSchema
from contractshape.validation.checks import check_declarations

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class CompilerError(Exception):
    """Raised when the declarations cannot be compiled.

    Covers name conflicts between descriptors and duplicate model names
    among the compiled roots.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


@dataclass(frozen=True)
class CompiledModel:
    """The three artifacts derived from one model.

    Attributes:
        name: The model name.
        validator: The derived validator.
        type_schema: The derived type schema.
        json_schema: The derived JSON-Schema document.
    """

    name: str
    validator: ModelValidator
    type_schema: TypeSchema
    json_schema: dict[str, Any]


def compile_models(
    models: Iterable[ModelDescriptor],
    context: CompilationContext | None = None,
) -> dict[str, CompiledModel]:
    """Check and compile a set of models.

    For the models given, the compiler:
    1. Runs :func:`~contractshape.validation.checks.check_declarations` over
       everything reachable from them, logging each warning.
    2. Aborts with :class:`CompilerError` if any check reported an error.
    3. Derives the validator, type schema and JSON-Schema of each model.

    Args:
        models: The models to compile.  Passing the same model twice compiles
            it once.
        context: Compilation context shared by all derivations.

    Returns:
        A mapping from model name to its :class:`CompiledModel`, in the order
        the models were given.

    Raises:
        CompilerError: On any declaration error.
    """
    ctx = resolve_context(context)
    roots = _unique(models)

    result = check_declarations(roots)
    for warning in result.warnings:
        logger.warning(warning.message)
    if result.has_errors:
        error_lines = "\n".join(f"  {e.message}" for e in result.errors)
        raise CompilerError(f"Declaration errors:\n{error_lines}")

    compiled: dict[str, CompiledModel] = {}
    for model in roots:
        compiled[model.name] = CompiledModel(
            name=model.name,
            validator=derive_validator(model, ctx),
            type_schema=derive_type_schema(model, ctx),
            json_schema=derive_json_schema(model, ctx),
        )
        logger.info("Compiled model '%s'", model.name)
    return compiled


# ################
# Implementation
# ################


def _unique(models: Iterable[ModelDescriptor]) -> list[ModelDescriptor]:
    """Drop repeated instances, keeping first occurrences in order."""
    unique: list[ModelDescriptor] = []
    for model in models:
        if not any(model is seen for seen in unique):
            unique.append(model)
    return unique
