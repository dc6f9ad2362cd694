# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""The compilation context shared by the derivations."""

from __future__ import annotations

from dataclasses import dataclass, field

from contractshape.config import CompilerConfig
from contractshape.scalars.builtin import BuiltinScalars
from contractshape.scalars.registry import ScalarRegistry, default_registry

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class CompilationContext:
    """The scalar registry and configuration a derivation runs against.

    Attributes:
        registry: Source of scalar identity.  Defaults to the process-wide registry.
        config: Caller policies.
    """

    registry: ScalarRegistry = field(default_factory=default_registry)
    config: CompilerConfig = field(default_factory=CompilerConfig)

    @property
    def scalars(self) -> BuiltinScalars:
        """The standard scalars bound to this context's registry."""
        return BuiltinScalars(self.registry)


def resolve_context(context: CompilationContext | None) -> CompilationContext:
    """Return *context*, or a default context when it is ``None``."""
    return context if context is not None else CompilationContext()
