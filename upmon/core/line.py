"""Compose one output line per change event."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from upmon.core.model import FormattedPair, OutputConfig


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO 8601 UTC with millisecond precision, e.g. ``2024-02-11T17:19:36.123Z``."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_line(
    device_path: str,
    pairs: Sequence[FormattedPair],
    config: OutputConfig,
    now: datetime | None = None,
) -> str:
    if not pairs:
        raise ValueError("build_line requires at least one formatted pair")
    body = config.delimiter.join(
        f"{pair.name}{config.separator}{pair.display_value}" for pair in pairs
    )
    line = f"{device_path} {body}"
    if config.include_timestamp:
        line = f"{utc_timestamp(now)} {line}"
    return line
