from datetime import timedelta

import pytest

from envspec.duration import (
    HOUR,
    MICROSECOND,
    MINUTE,
    NANOSECOND,
    SECOND,
    duration,
    format_duration,
    parse_duration,
)
from envspec.spec import Registry, SpecError, UndefinedError, ValueInvalidError

NAME = "FERRITE_DURATION"


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(NAME, raising=False)


def test_empty_name_is_rejected(registry):
    with pytest.raises(SpecError) as info:
        duration("", "<desc>").optional(registry)
    assert str(info.value) == "invalid specification: variable name must not be empty"


def test_empty_description_is_rejected(registry):
    with pytest.raises(SpecError) as info:
        duration(NAME, "").optional(registry)
    assert str(info.value) == (
        "specification for FERRITE_DURATION is invalid: variable description must not be empty"
    )


def test_required_returns_value(monkeypatch, registry):
    monkeypatch.setenv(NAME, "630s")
    assert duration(NAME, "<desc>").required(registry).value() == 630 * SECOND


def test_optional_returns_value(monkeypatch, registry):
    monkeypatch.setenv(NAME, "630s")
    assert duration(NAME, "<desc>").optional(registry).value() == 630 * SECOND


INVALID = [
    ("630", "value of FERRITE_DURATION (630) is invalid: missing unit"),
    ("630q", 'value of FERRITE_DURATION (630q) is invalid: unknown unit "q"'),
    ("0s", "value of FERRITE_DURATION (0s) is invalid: too low, expected 1ns or greater"),
]


@pytest.mark.parametrize("value, expect", INVALID)
def test_required_invalid(monkeypatch, registry, value, expect):
    monkeypatch.setenv(NAME, value)
    var = duration(NAME, "<desc>").required(registry)
    with pytest.raises(ValueInvalidError) as info:
        var.value()
    assert str(info.value) == expect


@pytest.mark.parametrize("value, expect", INVALID)
def test_optional_invalid(monkeypatch, registry, value, expect):
    monkeypatch.setenv(NAME, value)
    var = duration(NAME, "<desc>").optional(registry)
    with pytest.raises(ValueInvalidError) as info:
        var.value()
    assert str(info.value) == expect


def test_required_default(registry):
    expect = 10 * MINUTE + 30 * SECOND
    assert duration(NAME, "<desc>").with_default(expect).required(registry).value() == expect


def test_optional_default(registry):
    expect = 10 * MINUTE + 30 * SECOND
    assert duration(NAME, "<desc>").with_default(expect).optional(registry).value() == expect


def test_default_accepts_timedelta(registry):
    var = duration(NAME, "<desc>").with_default(timedelta(minutes=10, seconds=30)).required(registry)
    assert var.value() == 630 * SECOND


def test_required_without_default(registry):
    with pytest.raises(UndefinedError) as info:
        duration(NAME, "<desc>").required(registry).value()
    assert str(info.value) == "FERRITE_DURATION is undefined and does not have a default value"


def test_optional_without_default(registry):
    assert duration(NAME, "<desc>").optional(registry).value() is None


def test_below_minimum(monkeypatch, registry):
    monkeypatch.setenv(NAME, "1s")
    var = duration(NAME, "<desc>").with_minimum(5 * SECOND).required(registry)
    with pytest.raises(ValueInvalidError) as info:
        var.value()
    assert str(info.value) == (
        "value of FERRITE_DURATION (1s) is invalid: too low, expected 5s or greater"
    )


def test_above_maximum(monkeypatch, registry):
    monkeypatch.setenv(NAME, "10s")
    var = duration(NAME, "<desc>").with_maximum(5 * SECOND).required(registry)
    with pytest.raises(ValueInvalidError) as info:
        var.value()
    assert str(info.value) == (
        "value of FERRITE_DURATION (10s) is invalid: too high, expected between 1ns and 5s"
    )


def test_limits_allow_zero(monkeypatch, registry):
    monkeypatch.setenv(NAME, "0h")
    var = duration(NAME, "<desc>").with_minimum(-HOUR).with_maximum(HOUR).required(registry)
    assert var.value() == 0
    assert format_duration(var.value()) == "0s"


def test_deprecated_value(monkeypatch, registry):
    monkeypatch.setenv(NAME, "630s")
    var = duration(NAME, "example duration variable").deprecated(registry)
    assert format_duration(var.deprecated_value()) == "10m30s"


def test_spaces_are_ignored(monkeypatch, registry):
    monkeypatch.setenv(NAME, "3h 10m 0s")
    value = duration(NAME, "<desc>").required(registry).value()
    assert value == 3 * HOUR + 10 * MINUTE
    assert format_duration(value) == "3h10m"


def test_default_below_minimum_is_rejected(registry):
    with pytest.raises(SpecError) as info:
        duration(NAME, "<desc>").with_default(0).required(registry)
    assert str(info.value) == (
        "specification for FERRITE_DURATION is invalid: default value: too low, expected 1ns or greater"
    )


@pytest.mark.parametrize(
    "text, expect",
    [
        ("300ms", 300 * 1_000_000),
        ("-1.5h", -90 * MINUTE),
        ("2h45m", 2 * HOUR + 45 * MINUTE),
        ("0", 0),
        ("+0", 0),
        (".5s", 500 * 1_000_000),
        ("1us", MICROSECOND),
        ("1\u00b5s", MICROSECOND),
        ("1ns", NANOSECOND),
    ],
)
def test_parse_duration(text, expect):
    assert parse_duration(text) == expect


@pytest.mark.parametrize("text", ["-+10s", "", "-", ".s", "h"])
def test_parse_duration_invalid(text):
    with pytest.raises(ValueError, match="invalid duration"):
        parse_duration(text)


def test_parse_duration_overflow():
    with pytest.raises(ValueError, match="invalid duration"):
        parse_duration("9999999999999h")


@pytest.mark.parametrize(
    "value, expect",
    [
        (0, "0s"),
        (630 * SECOND, "10m30s"),
        (HOUR, "1h"),
        (-HOUR, "-1h"),
        (10 * SECOND, "10s"),
        (3 * HOUR + 20 * MINUTE, "3h20m"),
        (NANOSECOND, "1ns"),
        (1500, "1.5\u00b5s"),
        (100 * 1_000_000, "100ms"),
        (10 * MINUTE, "10m"),
        (1500 * 1_000_000, "1.5s"),
    ],
)
def test_format_duration(value, expect):
    assert format_duration(value) == expect


@pytest.mark.parametrize("value", [NANOSECOND, 1500, 630 * SECOND, HOUR, -90 * MINUTE])
def test_format_parse_round_trip(value):
    assert parse_duration(format_duration(value)) == value