# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks over a set of declared models.

These checks look at the whole descriptor graph reachable from the given
models, before any derivation runs, and catch declarations the derivations
would otherwise only trip over one at a time.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from contractshape.descriptors.enum import EnumDescriptor
from contractshape.descriptors.model import Descriptor, ModelDescriptor
from contractshape.descriptors.scalar import ScalarDescriptor

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A declaration that is valid but likely unintended.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A declaration the derivations cannot compile consistently.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the declaration checks.

    Attributes:
        warnings: Non-fatal issues found.
        errors: Fatal errors that make the declarations unusable.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal errors were found."""
        return len(self.errors) > 0


def check_declarations(models: Iterable[ModelDescriptor]) -> ValidationResult:
    """Run all declaration checks on the graph reachable from *models*.

    Checks performed:

    1. **Name conflicts** (error): Two different descriptor instances share a
       name.  Type schemas reconcile definitions by name, so a scalar built
       twice instead of taken from a registry, or two different models with
       the same name, cannot be stitched.  Enums are the exception: two enum
       instances with the same name and the same values are one type.

    2. **Duplicate enum values** (warning): The enum is usable, with the first
       occurrence of each value taking precedence.

    3. **Recursive models** (warning): A model reaches itself through a chain
       of nested model fields.  Derivations handle this by reference, but
       every instance of such a model must eventually end in an absent
       optional field or an empty array.

    Args:
        models: The root models to check.

    Returns:
        A :class:`ValidationResult`; empty when the declarations are clean.
    """
    graph = _collect(models)
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    errors.extend(_check_name_conflicts(graph))
    warnings.extend(_check_duplicate_enum_values(graph))
    warnings.extend(_check_model_cycles(graph))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################


@dataclass
class _Graph:
    """Every descriptor reachable from the roots, in discovery order."""

    descriptors: list[Descriptor] = field(default_factory=list)
    models: list[ModelDescriptor] = field(default_factory=list)


def _kind_label(descriptor: Descriptor) -> str:
    if isinstance(descriptor, ModelDescriptor):
        return "model"
    if isinstance(descriptor, EnumDescriptor):
        return "enum"
    if isinstance(descriptor, ScalarDescriptor):
        return "scalar"
    return "JSON-Schema type"


def _collect(models: Iterable[ModelDescriptor]) -> _Graph:
    graph = _Graph()
    seen: set[int] = set()
    pending: list[Descriptor] = list(models)
    while pending:
        descriptor = pending.pop(0)
        if id(descriptor) in seen:
            continue
        seen.add(id(descriptor))
        graph.descriptors.append(descriptor)
        if isinstance(descriptor, ModelDescriptor):
            graph.models.append(descriptor)
            pending.extend(slot.descriptor for slot in descriptor.fields.values())
    return graph


def _detect_cycle(graph: dict[str, list[str]]) -> list[str] | None:
    """Detect a cycle in a directed graph using DFS.

    Uses a three-colour marking scheme (white/grey/black) to distinguish
    unvisited, in-progress, and fully-explored nodes.

    Args:
        graph: Adjacency list mapping each node to its direct neighbours.
            Nodes that appear only as neighbours (not as keys) are treated
            as having no outgoing edges.

    Returns:
        A list of node names forming the cycle with the start node repeated
        at the end (e.g. ``["A", "B", "C", "A"]``), or ``None`` if the
        graph is acyclic.
    """
    WHITE, GREY, BLACK = 0, 1, 2
    color: dict[str, int] = {}
    path: list[str] = []

    def _dfs(node: str) -> list[str] | None:
        color[node] = GREY
        path.append(node)
        for neighbor in graph.get(node, []):
            state = color.get(neighbor, WHITE)
            if state == GREY:
                cycle_start = path.index(neighbor)
                return path[cycle_start:] + [neighbor]
            if state == WHITE:
                result = _dfs(neighbor)
                if result is not None:
                    return result
        path.pop()
        color[node] = BLACK
        return None

    for node in graph:
        if color.get(node, WHITE) == WHITE:
            result = _dfs(node)
            if result is not None:
                return result
    return None


def _check_name_conflicts(graph: _Graph) -> list[ValidationError]:
    """Return errors for distinct descriptors declared under one name."""
    errors: list[ValidationError] = []
    owners: dict[str, Descriptor] = {}
    reported: set[str] = set()
    for descriptor in graph.descriptors:
        name = descriptor.name
        if name is None:
            continue
        owner = owners.setdefault(name, descriptor)
        if owner is descriptor or name in reported:
            continue
        if (
            isinstance(owner, EnumDescriptor)
            and isinstance(descriptor, EnumDescriptor)
            and owner.distinct_values == descriptor.distinct_values
        ):
            continue
        reported.add(name)
        errors.append(
            ValidationError(
                message=(
                    f"Name '{name}' is declared by two different descriptors "
                    f"({_kind_label(owner)} and {_kind_label(descriptor)})."
                )
            )
        )
    return errors


def _check_duplicate_enum_values(graph: _Graph) -> list[ValidationWarning]:
    """Return warnings for enums that list a value more than once."""
    warnings: list[ValidationWarning] = []
    for descriptor in graph.descriptors:
        if not isinstance(descriptor, EnumDescriptor):
            continue
        duplicates = sorted({v for v in descriptor.values if descriptor.values.count(v) > 1})
        if duplicates:
            listed = ", ".join(f"'{v}'" for v in duplicates)
            warnings.append(
                ValidationWarning(
                    message=f"Enum '{descriptor.name}' declares duplicate values {listed}; first occurrence is used."
                )
            )
    return warnings


def _check_model_cycles(graph: _Graph) -> list[ValidationWarning]:
    """Return a warning for each recursive model cycle."""
    warnings: list[ValidationWarning] = []
    edges: dict[str, list[str]] = {}
    for model in graph.models:
        edges.setdefault(model.name, []).extend(
            slot.descriptor.name for slot in model.fields.values() if isinstance(slot.descriptor, ModelDescriptor)
        )

    # Report each cycle once, then cut it and look for the next one.
    cycle = _detect_cycle(edges)
    while cycle is not None:
        cycle_str = " -> ".join(cycle)
        warnings.append(ValidationWarning(message=f"Recursive model definition: {cycle_str} (derived by reference)."))
        edges[cycle[-2]] = [n for n in edges[cycle[-2]] if n != cycle[-1]]
        cycle = _detect_cycle(edges)
    return warnings
