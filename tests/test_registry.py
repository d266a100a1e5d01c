from __future__ import annotations

from pathlib import Path

import pytest

from upmon.core.errors import CatalogLoadError, CatalogValidationError
from upmon.core.model import ValueKind
from upmon.core.registry import load_registry


def _write_catalog(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_load_packaged_catalog() -> None:
    registry = load_registry()
    assert registry.interface == "org.freedesktop.UPower.Device"
    assert registry.list_supported()[:7] == (
        "UpdateTime",
        "Online",
        "TimeToEmpty",
        "TimeToFull",
        "Percentage",
        "IsPresent",
        "State",
    )
    state = registry.lookup("State")
    assert state is not None
    assert state.kind is ValueKind.ENUM
    assert state.labels[2] == "Discharging"
    assert state.labels[4] == "FullyCharged"
    assert state.fallback == "Unknown"


def test_lookup_unknown_property_returns_none() -> None:
    registry = load_registry()
    assert registry.lookup("BadTarget") is None
    assert "BadTarget" not in registry


def test_packaged_warning_level_keeps_none_label() -> None:
    spec = load_registry().lookup("WarningLevel")
    assert spec is not None
    assert spec.labels[1] == "None"


def test_custom_catalog_loads(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path / "catalog.yaml",
        """
interface: org.example.Device
properties:
  Switch:
    kind: enum
    labels:
      0: Off
      1: On
  Level:
    kind: percentage
""",
    )

    registry = load_registry(path)
    assert registry.list_supported() == ("Switch", "Level")
    switch = registry.lookup("Switch")
    assert switch is not None
    assert switch.labels == {0: "Off", 1: "On"}


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path / "dup.yaml",
        """
interface: org.example.Device
properties:
  Online:
    kind: bool
  Online:
    kind: string
""",
    )

    with pytest.raises(CatalogValidationError):
        load_registry(path)


def test_missing_kind_rejected(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path / "missing.yaml",
        """
interface: org.example.Device
properties:
  Online:
    description: no kind here
""",
    )

    with pytest.raises(CatalogValidationError) as exc:
        load_registry(path)
    assert "Schema validation failed" in str(exc.value)


def test_enum_without_labels_rejected(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path / "enum.yaml",
        """
interface: org.example.Device
properties:
  State:
    kind: enum
""",
    )

    with pytest.raises(CatalogValidationError):
        load_registry(path)


def test_non_integer_label_code_rejected(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path / "codes.yaml",
        """
interface: org.example.Device
properties:
  State:
    kind: enum
    labels:
      charging: Charging
""",
    )

    with pytest.raises(CatalogValidationError):
        load_registry(path)


def test_labels_on_non_enum_rejected(tmp_path: Path) -> None:
    path = _write_catalog(
        tmp_path / "labels.yaml",
        """
interface: org.example.Device
properties:
  Online:
    kind: bool
    labels:
      0: Nope
""",
    )

    with pytest.raises(CatalogValidationError):
        load_registry(path)


def test_unreadable_catalog_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(CatalogLoadError):
        load_registry(tmp_path / "absent.yaml")
