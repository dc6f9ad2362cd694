# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""The standard scalar set.

Each scalar is built by a module-level factory and handed out through a
:class:`~contractshape.scalars.registry.ScalarRegistry`, so every caller
sharing a registry sees the same instance per name.

The ``*_unsecure`` scalars and ``Boolean``/``ID`` only check the Python type;
the rest enforce a domain (pattern, range or format) that their JSON-Schema
fragment states as well.
"""

from __future__ import annotations

import datetime as dt
import math
import re
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import AnyUrl, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from contractshape.descriptors.scalar import ScalarDescriptor, ScalarViolation
from contractshape.scalars.registry import ScalarRegistry, default_registry

# ###############
# Public Interface
# ###############

TIME_PATTERN = r"^\d{2}:\d{2}(:\d{2})?$"
LOCALE_PATTERN = r"^[A-Za-z]{2}(?:-[A-Za-z0-9]{2,8})*$"
TIMEZONE_PATTERN = r"^(?:UTC|[A-Za-z_]+/[A-Za-z_]+)$"
PHONE_PATTERN = r"^[+]?\d[\d\s().-]{3,}$"
CURRENCY_PATTERN = r"^[A-Z]{3}$"
COUNTRY_PATTERN = r"^[A-Z]{2}$"

LATITUDE_RANGE = (-90, 90)
LONGITUDE_RANGE = (-180, 180)


class BuiltinScalars:
    """Accessors for the standard scalars, bound to one registry.

    Example::

        scalars = BuiltinScalars(ScalarRegistry())
        assert scalars.non_empty_string() is scalars.non_empty_string()
    """

    def __init__(self, registry: ScalarRegistry | None = None) -> None:
        self._registry = registry if registry is not None else default_registry()

    @property
    def registry(self) -> ScalarRegistry:
        return self._registry

    def get(self, name: str) -> ScalarDescriptor:
        """Return the built-in scalar registered as *name*.

        Raises:
            KeyError: If *name* is not a built-in scalar.
        """
        if name not in BUILTIN_FACTORIES:
            raise KeyError(f"Unknown built-in scalar '{name}'")
        return self._registry.get(name, BUILTIN_FACTORIES[name])

    # Unvalidated primitives.

    def string_unsecure(self) -> ScalarDescriptor:
        return self.get("String_unsecure")

    def int_unsecure(self) -> ScalarDescriptor:
        return self.get("Int_unsecure")

    def float_unsecure(self) -> ScalarDescriptor:
        return self.get("Float_unsecure")

    def boolean(self) -> ScalarDescriptor:
        return self.get("Boolean")

    def id(self) -> ScalarDescriptor:
        return self.get("ID")

    # Validated scalars.

    def json(self) -> ScalarDescriptor:
        return self.get("JSON")

    def json_object(self) -> ScalarDescriptor:
        return self.get("JSONObject")

    def date(self) -> ScalarDescriptor:
        return self.get("Date")

    def date_time(self) -> ScalarDescriptor:
        return self.get("DateTime")

    def time(self) -> ScalarDescriptor:
        return self.get("Time")

    def email_address(self) -> ScalarDescriptor:
        return self.get("EmailAddress")

    def url(self) -> ScalarDescriptor:
        return self.get("URL")

    def phone_number(self) -> ScalarDescriptor:
        return self.get("PhoneNumber")

    def non_empty_string(self) -> ScalarDescriptor:
        return self.get("NonEmptyString")

    def locale(self) -> ScalarDescriptor:
        return self.get("Locale")

    def time_zone(self) -> ScalarDescriptor:
        return self.get("TimeZone")

    def latitude(self) -> ScalarDescriptor:
        return self.get("Latitude")

    def longitude(self) -> ScalarDescriptor:
        return self.get("Longitude")

    def currency(self) -> ScalarDescriptor:
        return self.get("Currency")

    def country_code(self) -> ScalarDescriptor:
        return self.get("CountryCode")


# ################
# Implementation
# ################


def _fail(name: str, reason: str) -> ScalarViolation:
    return ScalarViolation(name, reason)


def _require_str(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise _fail(name, f"expected a string, got {type(value).__name__}")
    return value


def _require_number(name: str, value: Any) -> int | float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _fail(name, f"expected a number, got {type(value).__name__}")
    if math.isnan(value):
        raise _fail(name, "NaN is not a number")
    return value


def _coerce_number(name: str, value: Any) -> int | float:
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            value = float(value)
        except ValueError:
            raise _fail(name, f"{value!r} is not a number") from None
    return _require_number(name, value)


def _make_string_unsecure() -> ScalarDescriptor:
    name = "String_unsecure"
    return ScalarDescriptor(
        name=name,
        description="Unvalidated string scalar",
        validator=lambda v: _require_str(name, v),
        serializer=str,
        json_schema={"type": "string"},
    )


def _make_int_unsecure() -> ScalarDescriptor:
    name = "Int_unsecure"

    def validate(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise _fail(name, f"expected an integer, got {type(value).__name__}")
        return value

    def parse(value: Any) -> int:
        number = _coerce_number(name, value)
        if isinstance(number, float):
            if not number.is_integer():
                raise _fail(name, f"{value!r} is not an integer")
            return int(number)
        return number

    return ScalarDescriptor(
        name=name,
        description="Unvalidated integer scalar",
        validator=validate,
        parser=parse,
        serializer=lambda v: math.trunc(v if isinstance(v, (int, float)) else float(v)),
        json_schema={"type": "integer"},
    )


def _make_float_unsecure() -> ScalarDescriptor:
    name = "Float_unsecure"
    return ScalarDescriptor(
        name=name,
        description="Unvalidated float scalar",
        validator=lambda v: _require_number(name, v),
        parser=lambda v: _coerce_number(name, v),
        serializer=float,
        json_schema={"type": "number"},
    )


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _make_boolean() -> ScalarDescriptor:
    name = "Boolean"

    def validate(value: Any) -> bool:
        if not isinstance(value, bool):
            raise _fail(name, f"expected a boolean, got {type(value).__name__}")
        return value

    def parse(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise _fail(name, f"{value!r} is not a boolean")

    return ScalarDescriptor(
        name=name,
        description="Unvalidated boolean scalar",
        validator=validate,
        parser=parse,
        serializer=bool,
        json_schema={"type": "boolean"},
    )


def _make_id() -> ScalarDescriptor:
    name = "ID"

    def parse(value: Any) -> str:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return _require_str(name, value)

    return ScalarDescriptor(
        name=name,
        description="Unvalidated id scalar",
        validator=lambda v: _require_str(name, v),
        parser=parse,
        serializer=str,
        json_schema={"type": "string"},
    )


def _is_json_value(value: Any) -> bool:
    if value is None or isinstance(value, (str, bool, int)):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, (list, tuple)):
        return all(_is_json_value(item) for item in value)
    if isinstance(value, Mapping):
        return all(isinstance(k, str) and _is_json_value(v) for k, v in value.items())
    return False


def _make_json() -> ScalarDescriptor:
    name = "JSON"

    def validate(value: Any) -> Any:
        if not _is_json_value(value):
            raise _fail(name, f"{type(value).__name__} value is not representable as JSON")
        return value

    return ScalarDescriptor(name=name, validator=validate, json_schema={})


def _make_json_object() -> ScalarDescriptor:
    name = "JSONObject"

    def validate(value: Any) -> dict[str, Any]:
        if not isinstance(value, Mapping) or not all(isinstance(k, str) for k in value):
            raise _fail(name, f"expected an object with string keys, got {type(value).__name__}")
        return dict(value)

    return ScalarDescriptor(
        name=name,
        validator=validate,
        serializer=lambda v: dict(v) if v is not None else {},
        json_schema={"type": "object"},
    )


def _make_date() -> ScalarDescriptor:
    name = "Date"

    def validate(value: Any) -> dt.date:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, dt.date):
            return value
        text = _require_str(name, value)
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            raise _fail(name, f"{text!r} is not an ISO-8601 date") from None

    return ScalarDescriptor(
        name=name,
        validator=validate,
        serializer=lambda v: v.isoformat() if isinstance(v, dt.date) else str(v),
        json_schema={"type": "string", "format": "date"},
    )


def _serialize_datetime(value: Any) -> str:
    if not isinstance(value, dt.datetime):
        return str(value)
    text = value.isoformat()
    if value.utcoffset() == dt.timedelta(0):
        text = text.removesuffix("+00:00") + "Z"
    return text


def _make_date_time() -> ScalarDescriptor:
    name = "DateTime"

    def validate(value: Any) -> dt.datetime:
        if isinstance(value, dt.datetime):
            return value
        text = _require_str(name, value)
        normalized = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
        try:
            return dt.datetime.fromisoformat(normalized)
        except ValueError:
            raise _fail(name, f"{text!r} is not an ISO-8601 date-time") from None

    return ScalarDescriptor(
        name=name,
        validator=validate,
        serializer=_serialize_datetime,
        json_schema={"type": "string", "format": "date-time"},
    )


def _pattern_scalar(name: str, pattern: str, description: str | None = None) -> ScalarDescriptor:
    compiled = re.compile(pattern)

    def validate(value: Any) -> str:
        text = _require_str(name, value)
        if compiled.fullmatch(text) is None:
            raise _fail(name, f"{text!r} does not match pattern {pattern}")
        return text

    return ScalarDescriptor(
        name=name,
        description=description,
        validator=validate,
        serializer=str,
        json_schema={"type": "string", "pattern": pattern},
    )


def _adapter_scalar(name: str, adapter: TypeAdapter[Any], json_format: str) -> ScalarDescriptor:
    """A string scalar whose format is checked by a pydantic type adapter."""

    def validate(value: Any) -> str:
        text = _require_str(name, value)
        try:
            adapter.validate_python(text)
        except PydanticValidationError as exc:
            reason = exc.errors()[0]["msg"] if exc.errors() else str(exc)
            raise _fail(name, f"{text!r} is not a valid {json_format}: {reason}") from None
        return text

    return ScalarDescriptor(
        name=name,
        validator=validate,
        serializer=str,
        json_schema={"type": "string", "format": json_format},
    )


def _make_time() -> ScalarDescriptor:
    return _pattern_scalar("Time", TIME_PATTERN)


def _make_email_address() -> ScalarDescriptor:
    return _adapter_scalar("EmailAddress", TypeAdapter(EmailStr), "email")


def _make_url() -> ScalarDescriptor:
    return _adapter_scalar("URL", TypeAdapter(AnyUrl), "uri")


def _make_phone_number() -> ScalarDescriptor:
    return _pattern_scalar("PhoneNumber", PHONE_PATTERN)


def _make_non_empty_string() -> ScalarDescriptor:
    name = "NonEmptyString"

    def validate(value: Any) -> str:
        text = _require_str(name, value)
        if not text:
            raise _fail(name, "must not be empty")
        return text

    return ScalarDescriptor(
        name=name,
        validator=validate,
        serializer=str,
        json_schema={"type": "string", "minLength": 1},
    )


def _make_locale() -> ScalarDescriptor:
    return _pattern_scalar("Locale", LOCALE_PATTERN)


def _make_time_zone() -> ScalarDescriptor:
    return _pattern_scalar("TimeZone", TIMEZONE_PATTERN)


def _range_scalar(name: str, bounds: tuple[int, int]) -> ScalarDescriptor:
    low, high = bounds

    def check(value: int | float) -> int | float:
        if not low <= value <= high:
            raise _fail(name, f"{value!r} is outside [{low}, {high}]")
        return value

    return ScalarDescriptor(
        name=name,
        validator=lambda v: check(_require_number(name, v)),
        parser=lambda v: check(_coerce_number(name, v)),
        serializer=float,
        json_schema={"type": "number", "minimum": low, "maximum": high},
    )


def _make_latitude() -> ScalarDescriptor:
    return _range_scalar("Latitude", LATITUDE_RANGE)


def _make_longitude() -> ScalarDescriptor:
    return _range_scalar("Longitude", LONGITUDE_RANGE)


def _make_currency() -> ScalarDescriptor:
    return _pattern_scalar("Currency", CURRENCY_PATTERN, "ISO 4217 currency code")


def _make_country_code() -> ScalarDescriptor:
    return _pattern_scalar("CountryCode", COUNTRY_PATTERN, "ISO 3166-1 alpha-2 country code")


BUILTIN_FACTORIES: dict[str, Callable[[], ScalarDescriptor]] = {
    "String_unsecure": _make_string_unsecure,
    "Int_unsecure": _make_int_unsecure,
    "Float_unsecure": _make_float_unsecure,
    "Boolean": _make_boolean,
    "ID": _make_id,
    "JSON": _make_json,
    "JSONObject": _make_json_object,
    "Date": _make_date,
    "DateTime": _make_date_time,
    "Time": _make_time,
    "EmailAddress": _make_email_address,
    "URL": _make_url,
    "PhoneNumber": _make_phone_number,
    "NonEmptyString": _make_non_empty_string,
    "Locale": _make_locale,
    "TimeZone": _make_time_zone,
    "Latitude": _make_latitude,
    "Longitude": _make_longitude,
    "Currency": _make_currency,
    "CountryCode": _make_country_code,
}
