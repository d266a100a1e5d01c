"""Core data models used across registry, listener, service, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class ValueKind(str, Enum):
    BOOL = "bool"
    PERCENTAGE = "percentage"
    NUMBER = "number"
    ENUM = "enum"
    DURATION = "duration"
    TIMESTAMP = "timestamp"
    STRING = "string"


@dataclass(frozen=True)
class PropertySpec:
    name: str
    kind: ValueKind
    labels: dict[int, str] = field(default_factory=dict)
    fallback: str = "Unknown"
    description: str = ""


@dataclass(frozen=True)
class MonitoredTarget:
    device_path: str
    properties: tuple[str, ...]


@dataclass(frozen=True)
class ChangeEvent:
    device_path: str
    changed: tuple[tuple[str, Any], ...]


@dataclass(frozen=True)
class FormattedPair:
    name: str
    display_value: str


@dataclass(frozen=True)
class OutputConfig:
    separator: str = "="
    delimiter: str = " "
    include_timestamp: bool = False
    output_file: Path | None = None


@dataclass(frozen=True)
class WatchResult:
    subscribed: tuple[str, ...]
    lines_written: int
