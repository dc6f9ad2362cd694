# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks over declared models (name conflicts, duplicate enum values, recursion)."""

from contractshape.validation.checks import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    check_declarations,
)

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "check_declarations",
]
