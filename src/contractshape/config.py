# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler configuration and its YAML loader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

# ###############
# Public Interface
# ###############

EXTRA_FIELD_POLICIES = ("allow", "forbid")


class CompilerConfigError(Exception):
    """Raised when a compiler configuration is invalid or cannot be loaded."""


@dataclass(frozen=True)
class CompilerConfig:
    """Caller policies applied by the derivations.

    Attributes:
        extra_fields: ``"allow"`` passes unrecognized input fields through
            derived validators; ``"forbid"`` reports each as a violation.
        json_schema_dialect: When set, emitted as ``$schema`` at the root of
            derived JSON-Schema documents.
        include_descriptions: Whether model, field and enum descriptions are
            carried into the type schema and JSON-Schema outputs.
    """

    extra_fields: str = "allow"
    json_schema_dialect: str | None = None
    include_descriptions: bool = True

    def __post_init__(self) -> None:
        if self.extra_fields not in EXTRA_FIELD_POLICIES:
            raise CompilerConfigError(
                f"'extra-fields' must be one of {', '.join(EXTRA_FIELD_POLICIES)}, got {self.extra_fields!r}"
            )


def load_compiler_config(path: Path) -> CompilerConfig:
    """Load and parse a compiler configuration file.

    Args:
        path: Path to a YAML file with the optional keys ``extra-fields``,
            ``json-schema-dialect`` and ``include-descriptions``.

    Returns:
        A CompilerConfig populated from the file; absent keys keep their defaults.

    Raises:
        CompilerConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise CompilerConfigError(f"Compiler config file not found: {path}") from None
    except OSError as exc:
        raise CompilerConfigError(f"Cannot read compiler config file: {exc}") from exc

    return parse_compiler_config(text, source_label=str(path))


def parse_compiler_config(text: str, source_label: str = "<string>") -> CompilerConfig:
    """Parse compiler config YAML text into a CompilerConfig.

    Args:
        text: Raw YAML content.  An empty document yields the defaults.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        CompilerConfigError: If the YAML is invalid or a value has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise CompilerConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return CompilerConfig()
    if not isinstance(data, dict):
        raise CompilerConfigError(f"{source_label}: compiler config must be a YAML mapping")

    unknown = sorted(set(data) - set(_KEYS))
    if unknown:
        raise CompilerConfigError(f"{source_label}: unknown key(s): {', '.join(map(str, unknown))}")

    defaults = CompilerConfig()
    extra_fields = _optional_string(data, "extra-fields", source_label) or defaults.extra_fields
    dialect = _optional_string(data, "json-schema-dialect", source_label)
    include_descriptions = data.get("include-descriptions", defaults.include_descriptions)
    if not isinstance(include_descriptions, bool):
        raise CompilerConfigError(f"{source_label}: 'include-descriptions' must be a boolean")

    try:
        return CompilerConfig(
            extra_fields=extra_fields,
            json_schema_dialect=dialect,
            include_descriptions=include_descriptions,
        )
    except CompilerConfigError as exc:
        raise CompilerConfigError(f"{source_label}: {exc}") from None


# ################
# Implementation
# ################

_KEYS = ("extra-fields", "json-schema-dialect", "include-descriptions")


def _optional_string(mapping: dict[str, object], key: str, source_label: str) -> str | None:
    """Extract an optional string field, raising CompilerConfigError on a non-string value."""
    if key not in mapping or mapping[key] is None:
        return None
    value = mapping[key]
    if not isinstance(value, str):
        raise CompilerConfigError(f"{source_label}: '{key}' must be a string")
    return value
