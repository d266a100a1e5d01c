"""Stable public API for building tooling on top of upmon.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from upmon.core.errors import (
    CatalogLoadError,
    CatalogValidationError,
    ConfigurationError,
    DuplicatePathError,
    SinkWriteError,
    SubscriptionError,
    TransportConnectError,
    TransportDisconnectedError,
    TransportError,
    UnsupportedPropertyError,
    UpmonError,
    ValueKindError,
)
from upmon.core.formatter import format_value
from upmon.core.interest import InterestTable
from upmon.core.line import build_line
from upmon.core.model import (
    ChangeEvent,
    FormattedPair,
    MonitoredTarget,
    OutputConfig,
    PropertySpec,
    ValueKind,
    WatchResult,
)
from upmon.core.registry import PropertyRegistry
from upmon.core.service import MonitorService
from upmon.transports.base import NotificationSource
from upmon.transports.dbus import DBusNotificationSource, match_rule

__all__ = [
    "UpmonError",
    "ConfigurationError",
    "DuplicatePathError",
    "UnsupportedPropertyError",
    "CatalogLoadError",
    "CatalogValidationError",
    "ValueKindError",
    "SubscriptionError",
    "TransportError",
    "TransportConnectError",
    "TransportDisconnectedError",
    "SinkWriteError",
    "ChangeEvent",
    "FormattedPair",
    "MonitoredTarget",
    "OutputConfig",
    "PropertySpec",
    "ValueKind",
    "WatchResult",
    "InterestTable",
    "PropertyRegistry",
    "NotificationSource",
    "DBusNotificationSource",
    "build_line",
    "format_value",
    "match_rule",
    "Client",
]


class Client:
    """Public client for interacting with upmon core capabilities.

    A `Client` wraps the property catalog, target validation, and the
    monitoring loop behind a stable API intended for third-party tools
    (status bars, loggers, scripts).
    """

    def __init__(
        self,
        *,
        source_factory: Callable[[], NotificationSource] | None = None,
    ) -> None:
        self._service = MonitorService(source_factory=source_factory)

    @property
    def registry(self) -> PropertyRegistry:
        return self._service.registry

    def list_properties(self) -> list[PropertySpec]:
        return self._service.list_properties()

    def build_interest(self, paths: Sequence[str]) -> InterestTable:
        return self._service.build_interest(paths)

    def rules(self, paths: Sequence[str]) -> list[str]:
        return self._service.rules(paths)

    def watch(self, paths: Sequence[str], config: OutputConfig | None = None) -> WatchResult:
        return self._service.watch(paths, config or OutputConfig())
