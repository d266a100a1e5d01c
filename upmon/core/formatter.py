"""Render raw property values as their canonical display strings."""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from upmon.core.errors import ValueKindError
from upmon.core.model import PropertySpec, ValueKind


def _is_int(raw: Any) -> bool:
    return isinstance(raw, int) and not isinstance(raw, bool)


def _is_number(raw: Any) -> bool:
    return _is_int(raw) or isinstance(raw, float)


def secs_to_hhmmss(seconds: int) -> str:
    """Convert seconds to HH:MM:SS; hours grow past two digits as needed."""
    if seconds <= 0:
        return "00:00:00"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02}:{minutes:02}:{secs:02}"


def _format_bool(spec: PropertySpec, raw: Any) -> str:
    return "true" if raw else "false"


def _format_number(spec: PropertySpec, raw: Any) -> str:
    if isinstance(raw, float):
        if math.isfinite(raw) and raw.is_integer():
            return str(int(raw))
        return repr(raw)
    return str(raw)


def _format_enum(spec: PropertySpec, raw: Any) -> str:
    return spec.labels.get(raw, spec.fallback)


def _format_duration(spec: PropertySpec, raw: Any) -> str:
    return secs_to_hhmmss(raw)


def _format_timestamp(spec: PropertySpec, raw: Any) -> str:
    try:
        moment = datetime.fromtimestamp(raw, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return str(raw)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _format_string(spec: PropertySpec, raw: Any) -> str:
    return raw


_FORMATTERS: dict[ValueKind, tuple[Callable[[Any], bool], Callable[[PropertySpec, Any], str]]] = {
    ValueKind.BOOL: (lambda raw: isinstance(raw, bool), _format_bool),
    ValueKind.PERCENTAGE: (_is_number, _format_number),
    ValueKind.NUMBER: (_is_number, _format_number),
    ValueKind.ENUM: (_is_int, _format_enum),
    ValueKind.DURATION: (_is_int, _format_duration),
    ValueKind.TIMESTAMP: (_is_int, _format_timestamp),
    ValueKind.STRING: (lambda raw: isinstance(raw, str), _format_string),
}


def format_value(spec: PropertySpec, raw: Any) -> str:
    """Return the display string for ``raw`` according to ``spec.kind``.

    Raises ValueKindError when the Python type of ``raw`` is not one the kind
    accepts, e.g. a string reported for a boolean property.
    """
    accepts, render = _FORMATTERS[spec.kind]
    if not accepts(raw):
        raise ValueKindError(
            f"Property '{spec.name}' expects a {spec.kind.value} value, got {type(raw).__name__}: {raw!r}"
        )
    return render(spec, raw)
