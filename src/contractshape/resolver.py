# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution of lazy JSON-Schema fragments into plain JSON documents.

Scalar descriptors may declare their JSON-Schema fragment as a zero-argument
callable so that fragments can refer to definitions that do not exist yet at
declaration time.  Anything that hands JSON-Schema to a consumer must first
run it through :func:`resolve_json_schema`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Union

# ###############
# Public Interface
# ###############

# A fragment node: a plain JSON value, a producer of a node, a sequence of
# nodes, or a mapping from names to nodes.
LazyJson = Union[
    None,
    bool,
    int,
    float,
    str,
    Callable[[], "LazyJson"],
    list["LazyJson"],
    tuple["LazyJson", ...],
    Mapping[str, "LazyJson"],
]


def resolve_json_schema(node: LazyJson) -> Any:
    """Resolve *node* depth-first into a plain JSON document.

    Callables are invoked (with no arguments) and their result is resolved in
    turn; lists and tuples become lists; mappings become new dicts.  Nothing
    is memoized, so a producer that is reachable twice is invoked twice.

    Self-referential producers (a producer whose result contains itself) are
    not supported and recurse until the interpreter's recursion limit is hit.

    Args:
        node: The fragment to resolve.

    Returns:
        A tree made only of ``dict``, ``list``, ``str``, ``int``, ``float``,
        ``bool`` and ``None``.  Containers are always fresh copies, so the
        result may be mutated without affecting the declared fragment.
    """
    while callable(node):
        node = node()
    if isinstance(node, Mapping):
        return {key: resolve_json_schema(value) for key, value in node.items()}
    if isinstance(node, (list, tuple)):
        return [resolve_json_schema(item) for item in node]
    return node
