# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Identity cache for scalar descriptors.

Type schemas treat two scalars with the same name but different descriptor
instances as incompatible when they are stitched together.  Every place that
needs a named scalar therefore obtains it through a :class:`ScalarRegistry`,
which guarantees one instance per name for the lifetime of the registry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from contractshape.descriptors.scalar import ScalarDescriptor

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


class ScalarRegistry:
    """A name → :class:`ScalarDescriptor` mapping that only ever grows.

    The check-then-insert in :meth:`get` runs under a re-entrant lock, so
    concurrent threads asking for an unseen name observe exactly one factory
    call and the same instance.  Factories may themselves obtain other
    scalars from the same registry.
    """

    def __init__(self) -> None:
        self._scalars: dict[str, ScalarDescriptor] = {}
        self._lock = threading.RLock()

    def get(self, name: str, factory: Callable[[], ScalarDescriptor]) -> ScalarDescriptor:
        """Return the scalar registered under *name*, creating it with *factory* on first use.

        Args:
            name: Logical scalar name.
            factory: Zero-argument callable producing the scalar.  Only called
                when *name* has not been registered yet.

        Returns:
            The single instance registered under *name*.

        Raises:
            ValueError: If *factory* produces a scalar with a different name.
        """
        with self._lock:
            existing = self._scalars.get(name)
            if existing is not None:
                return existing
            scalar = factory()
            if scalar.name != name:
                raise ValueError(f"Factory for scalar '{name}' produced a scalar named '{scalar.name}'")
            self._scalars[name] = scalar
            logger.debug("Registered scalar '%s'", name)
            return scalar

    def lookup(self, name: str) -> ScalarDescriptor | None:
        """Return the scalar registered under *name*, or ``None``."""
        with self._lock:
            return self._scalars.get(name)

    def names(self) -> list[str]:
        """Registered names, in registration order."""
        with self._lock:
            return list(self._scalars)

    def clear(self) -> None:
        """Forget every registered scalar.  Intended for test harnesses only."""
        with self._lock:
            self._scalars.clear()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._scalars

    def __len__(self) -> int:
        with self._lock:
            return len(self._scalars)


def default_registry() -> ScalarRegistry:
    """Return the process-wide registry used when no other one is supplied."""
    return _DEFAULT_REGISTRY


# ################
# Implementation
# ################

_DEFAULT_REGISTRY = ScalarRegistry()
