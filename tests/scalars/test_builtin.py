# Copyright 2026 Contractshape Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the standard scalar set."""

import datetime as dt
import math
from typing import Any

import pytest

from contractshape.descriptors import ScalarViolation
from contractshape.scalars import BUILTIN_FACTORIES, BuiltinScalars, ScalarRegistry

# ###############
# Test Helpers
# ###############


def _scalars() -> BuiltinScalars:
    return BuiltinScalars(ScalarRegistry())


# One in-domain sample per built-in scalar.
_SAMPLES: dict[str, Any] = {
    "String_unsecure": "hello",
    "Int_unsecure": 42,
    "Float_unsecure": 1.5,
    "Boolean": True,
    "ID": "abc-123",
    "JSON": {"a": [1, None, "x"]},
    "JSONObject": {"k": "v"},
    "Date": "2024-02-29",
    "DateTime": "2024-01-02T03:04:05Z",
    "Time": "12:30:15",
    "EmailAddress": "dev@contractshape.io",
    "URL": "https://contractshape.io/docs",
    "PhoneNumber": "+1 555-123-4567",
    "NonEmptyString": "x",
    "Locale": "en-US",
    "TimeZone": "Europe/Berlin",
    "Latitude": 45,
    "Longitude": -122.4,
    "Currency": "EUR",
    "CountryCode": "DE",
}


# ###############
# Registry Binding
# ###############


def test_samples_cover_every_builtin() -> None:
    assert set(_SAMPLES) == set(BUILTIN_FACTORIES)


def test_accessors_return_cached_instances() -> None:
    scalars = _scalars()
    assert scalars.non_empty_string() is scalars.non_empty_string()
    assert scalars.get("NonEmptyString") is scalars.non_empty_string()


def test_accessors_share_registry() -> None:
    """Two accessor objects bound to one registry hand out the same instances."""
    registry = ScalarRegistry()
    assert BuiltinScalars(registry).email_address() is BuiltinScalars(registry).email_address()


def test_separate_registries_give_separate_instances() -> None:
    assert _scalars().currency() is not _scalars().currency()


def test_unknown_builtin_raises() -> None:
    with pytest.raises(KeyError, match="Unknown built-in scalar"):
        _scalars().get("Money")


@pytest.mark.parametrize("name", sorted(BUILTIN_FACTORIES))
def test_scalar_name_matches_registry_key(name: str) -> None:
    assert _scalars().get(name).name == name


# ###############
# Round Trip
# ###############


@pytest.mark.parametrize("name", sorted(_SAMPLES))
def test_serialize_then_parse_is_idempotent(name: str) -> None:
    """Parsing the serialized form of a validated value yields the same value."""
    scalar = _scalars().get(name)
    value = scalar.validate(_SAMPLES[name])
    assert scalar.parse_external(scalar.serialize(value)) == value


@pytest.mark.parametrize("name", sorted(_SAMPLES))
def test_parse_then_serialize_is_stable(name: str) -> None:
    """Serializing a parsed value and parsing it again changes nothing."""
    scalar = _scalars().get(name)
    once = scalar.serialize(scalar.parse_external(_SAMPLES[name]))
    assert scalar.serialize(scalar.parse_external(once)) == once


# ###############
# Unvalidated Primitives
# ###############


class TestPrimitives:
    def test_string_rejects_non_string(self) -> None:
        with pytest.raises(ScalarViolation):
            _scalars().string_unsecure().validate(1)

    def test_int_rejects_bool_and_float(self) -> None:
        scalar = _scalars().int_unsecure()
        with pytest.raises(ScalarViolation):
            scalar.validate(True)
        with pytest.raises(ScalarViolation):
            scalar.validate(1.0)

    def test_int_parse_coerces_numeric_strings(self) -> None:
        scalar = _scalars().int_unsecure()
        assert scalar.parse_external("42") == 42
        assert scalar.parse_external("4.0") == 4
        assert scalar.parse_external(7.0) == 7
        with pytest.raises(ScalarViolation):
            scalar.parse_external("4.5")
        with pytest.raises(ScalarViolation):
            scalar.parse_external("four")

    def test_int_serialize_truncates(self) -> None:
        assert _scalars().int_unsecure().serialize(4.9) == 4

    def test_float(self) -> None:
        scalar = _scalars().float_unsecure()
        assert scalar.validate(3) == 3
        assert scalar.parse_external("2.5") == 2.5
        with pytest.raises(ScalarViolation):
            scalar.validate(math.nan)
        with pytest.raises(ScalarViolation):
            scalar.validate("2.5")

    def test_boolean_validate_is_strict(self) -> None:
        with pytest.raises(ScalarViolation):
            _scalars().boolean().validate("true")

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("true", True), ("Yes", True), ("on", True), (1, True), ("false", False), ("0", False), ("off", False)],
    )
    def test_boolean_parse_is_lenient(self, raw: Any, expected: bool) -> None:
        assert _scalars().boolean().parse_external(raw) is expected

    def test_boolean_parse_rejects_other_strings(self) -> None:
        with pytest.raises(ScalarViolation):
            _scalars().boolean().parse_external("maybe")

    def test_id_parse_accepts_integers(self) -> None:
        scalar = _scalars().id()
        assert scalar.parse_external(12) == "12"
        with pytest.raises(ScalarViolation):
            scalar.validate(12)


# ###############
# Validated Scalars
# ###############


class TestJson:
    def test_json_accepts_any_json_value(self) -> None:
        scalar = _scalars().json()
        for value in (None, 1, "x", [1, 2], {"a": {"b": [True]}}):
            assert scalar.validate(value) == value

    def test_json_rejects_non_json(self) -> None:
        scalar = _scalars().json()
        with pytest.raises(ScalarViolation):
            scalar.validate(object())
        with pytest.raises(ScalarViolation):
            scalar.validate({"a": math.inf})
        with pytest.raises(ScalarViolation):
            scalar.validate({1: "non-string key"})

    def test_json_object_requires_mapping(self) -> None:
        scalar = _scalars().json_object()
        assert scalar.validate({"a": 1}) == {"a": 1}
        with pytest.raises(ScalarViolation):
            scalar.validate([1])


class TestDates:
    def test_date_from_iso_string(self) -> None:
        assert _scalars().date().validate("2024-02-29") == dt.date(2024, 2, 29)

    def test_date_rejects_invalid(self) -> None:
        with pytest.raises(ScalarViolation, match="ISO-8601 date"):
            _scalars().date().validate("2023-02-29")

    def test_date_serializes_iso(self) -> None:
        assert _scalars().date().serialize(dt.date(2024, 1, 2)) == "2024-01-02"

    def test_date_time_accepts_zulu(self) -> None:
        value = _scalars().date_time().validate("2024-01-02T03:04:05Z")
        assert value == dt.datetime(2024, 1, 2, 3, 4, 5, tzinfo=dt.UTC)

    def test_date_time_serializes_utc_as_zulu(self) -> None:
        value = dt.datetime(2024, 1, 2, 3, 4, 5, tzinfo=dt.UTC)
        assert _scalars().date_time().serialize(value) == "2024-01-02T03:04:05Z"

    def test_date_time_rejects_garbage(self) -> None:
        with pytest.raises(ScalarViolation):
            _scalars().date_time().validate("yesterday")

    def test_time_pattern(self) -> None:
        scalar = _scalars().time()
        assert scalar.validate("12:30") == "12:30"
        with pytest.raises(ScalarViolation, match="does not match pattern"):
            scalar.validate("1230")


class TestFormats:
    def test_email(self) -> None:
        scalar = _scalars().email_address()
        assert scalar.validate("dev@contractshape.io") == "dev@contractshape.io"
        with pytest.raises(ScalarViolation, match="not a valid email"):
            scalar.validate("not-an-email")

    def test_url(self) -> None:
        scalar = _scalars().url()
        assert scalar.validate("https://contractshape.io") == "https://contractshape.io"
        with pytest.raises(ScalarViolation, match="not a valid uri"):
            scalar.validate("not a url")

    def test_phone_number(self) -> None:
        with pytest.raises(ScalarViolation):
            _scalars().phone_number().validate("call me")

    def test_non_empty_string(self) -> None:
        with pytest.raises(ScalarViolation, match="must not be empty"):
            _scalars().non_empty_string().validate("")

    @pytest.mark.parametrize("value", ["en", "de-DE", "zh-Hant-TW"])
    def test_locale_accepts(self, value: str) -> None:
        assert _scalars().locale().validate(value) == value

    def test_locale_rejects(self) -> None:
        with pytest.raises(ScalarViolation):
            _scalars().locale().validate("english")

    def test_time_zone(self) -> None:
        scalar = _scalars().time_zone()
        assert scalar.validate("UTC") == "UTC"
        with pytest.raises(ScalarViolation):
            scalar.validate("Berlin")

    def test_currency_and_country(self) -> None:
        s = _scalars()
        assert s.currency().validate("USD") == "USD"
        assert s.country_code().validate("US") == "US"
        with pytest.raises(ScalarViolation):
            s.currency().validate("usd")
        with pytest.raises(ScalarViolation):
            s.country_code().validate("USA")


class TestRanges:
    def test_latitude_bounds_inclusive(self) -> None:
        scalar = _scalars().latitude()
        assert scalar.validate(-90) == -90
        assert scalar.validate(90) == 90
        with pytest.raises(ScalarViolation, match="outside"):
            scalar.validate(90.01)

    def test_longitude_parse_from_string(self) -> None:
        assert _scalars().longitude().parse_external("-180") == -180
        with pytest.raises(ScalarViolation):
            _scalars().longitude().parse_external("181")

    def test_range_rejects_bool(self) -> None:
        with pytest.raises(ScalarViolation):
            _scalars().latitude().validate(True)


# ###############
# JSON-Schema Fragments
# ###############


@pytest.mark.parametrize(
    ("name", "fragment"),
    [
        ("String_unsecure", {"type": "string"}),
        ("Int_unsecure", {"type": "integer"}),
        ("Float_unsecure", {"type": "number"}),
        ("Boolean", {"type": "boolean"}),
        ("JSONObject", {"type": "object"}),
        ("Date", {"type": "string", "format": "date"}),
        ("DateTime", {"type": "string", "format": "date-time"}),
        ("EmailAddress", {"type": "string", "format": "email"}),
        ("URL", {"type": "string", "format": "uri"}),
        ("NonEmptyString", {"type": "string", "minLength": 1}),
        ("Latitude", {"type": "number", "minimum": -90, "maximum": 90}),
        ("Longitude", {"type": "number", "minimum": -180, "maximum": 180}),
        ("Currency", {"type": "string", "pattern": "^[A-Z]{3}$"}),
    ],
)
def test_json_schema_fragment(name: str, fragment: dict[str, Any]) -> None:
    assert _scalars().get(name).describe() == fragment


def test_json_scalar_fragment_is_unconstrained() -> None:
    assert _scalars().json().describe() == {}
