# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Scalar identity cache and the standard scalar set."""

from contractshape.scalars.builtin import BUILTIN_FACTORIES, BuiltinScalars
from contractshape.scalars.registry import ScalarRegistry, default_registry

__all__ = [
    "ScalarRegistry",
    "default_registry",
    "BuiltinScalars",
    "BUILTIN_FACTORIES",
    "builtin_scalars",
]


def builtin_scalars() -> BuiltinScalars:
    """Return the standard scalars bound to the process-wide registry."""
    return BuiltinScalars(default_registry())
