from __future__ import annotations

import pytest

from upmon.core.errors import ValueKindError
from upmon.core.formatter import format_value, secs_to_hhmmss
from upmon.core.model import PropertySpec, ValueKind
from upmon.core.registry import load_registry

REGISTRY = load_registry()


def _spec(name: str) -> PropertySpec:
    spec = REGISTRY.lookup(name)
    assert spec is not None
    return spec


def test_bool_literals() -> None:
    assert format_value(_spec("Online"), True) == "true"
    assert format_value(_spec("IsPresent"), False) == "false"


def test_percentage_keeps_raw_precision() -> None:
    assert format_value(_spec("Percentage"), 54.22) == "54.22"
    assert format_value(_spec("Percentage"), 81.0) == "81"
    assert format_value(_spec("Percentage"), 81) == "81"
    assert format_value(_spec("Energy"), 0.5) == "0.5"
    assert format_value(_spec("ChargeCycles"), -1) == "-1"


def test_enum_decodes_labels() -> None:
    state = _spec("State")
    assert format_value(state, 1) == "Charging"
    assert format_value(state, 2) == "Discharging"
    assert format_value(state, 4) == "FullyCharged"
    assert format_value(_spec("Type"), 2) == "Battery"


def test_enum_unknown_code_falls_back() -> None:
    assert format_value(_spec("State"), 42) == "Unknown"
    assert format_value(_spec("BatteryLevel"), 2) == "Unknown"


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "00:00:00"),
        (-5, "00:00:00"),
        (59, "00:00:59"),
        (3725, "01:02:05"),
        (12345, "03:25:45"),
        (400000, "111:06:40"),
    ],
)
def test_duration_hhmmss(seconds: int, expected: str) -> None:
    assert secs_to_hhmmss(seconds) == expected
    assert format_value(_spec("TimeToEmpty"), seconds) == expected


def test_timestamp_is_iso8601_utc_seconds() -> None:
    assert format_value(_spec("UpdateTime"), 1707671976) == "2024-02-11T17:19:36Z"
    assert format_value(_spec("UpdateTime"), 0) == "1970-01-01T00:00:00Z"


def test_timestamp_out_of_range_renders_raw_value() -> None:
    raw = 2**64 - 1
    assert format_value(_spec("UpdateTime"), raw) == str(raw)


def test_string_passthrough_unescaped() -> None:
    assert format_value(_spec("Model"), "Pack = 1 2") == "Pack = 1 2"


@pytest.mark.parametrize(
    ("name", "raw"),
    [
        ("Online", "yes"),
        ("Percentage", True),
        ("Percentage", "81"),
        ("State", 2.0),
        ("State", True),
        ("TimeToFull", 1.5),
        ("UpdateTime", "1707671976"),
        ("Vendor", 7),
    ],
)
def test_mismatched_type_raises(name: str, raw: object) -> None:
    with pytest.raises(ValueKindError):
        format_value(_spec(name), raw)


@pytest.mark.parametrize(
    ("kind", "raw"),
    [
        (ValueKind.BOOL, True),
        (ValueKind.PERCENTAGE, 0.0),
        (ValueKind.NUMBER, float("nan")),
        (ValueKind.NUMBER, float("inf")),
        (ValueKind.ENUM, 0),
        (ValueKind.DURATION, -1),
        (ValueKind.TIMESTAMP, -1),
        (ValueKind.STRING, "x"),
    ],
)
def test_every_kind_formats_to_stable_non_empty_string(kind: ValueKind, raw: object) -> None:
    spec = PropertySpec(name="Probe", kind=kind, labels={1: "One"})
    first = format_value(spec, raw)
    assert first
    assert format_value(spec, raw) == first
