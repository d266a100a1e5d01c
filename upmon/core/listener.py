"""Filter change notifications and turn the survivors into output lines."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from upmon.core.errors import SubscriptionError, ValueKindError
from upmon.core.formatter import format_value
from upmon.core.interest import InterestTable
from upmon.core.line import build_line
from upmon.core.model import ChangeEvent, FormattedPair, OutputConfig
from upmon.core.registry import PropertyRegistry
from upmon.core.sink import OutputSink
from upmon.transports.base import NotificationSource

LOGGER = logging.getLogger(__name__)


class ChangeListener:
    def __init__(
        self,
        interest: InterestTable,
        registry: PropertyRegistry,
        config: OutputConfig,
        sink: OutputSink,
    ) -> None:
        self.interest = interest
        self.registry = registry
        self.config = config
        self.sink = sink

    def subscribe(self, source: NotificationSource) -> tuple[str, ...]:
        """Subscribe every monitored path, tolerating failures while one remains.

        Returns the subscribed paths in configuration order. If no path could be
        subscribed, the last SubscriptionError is raised.
        """
        subscribed: list[str] = []
        last_error: SubscriptionError | None = None
        for path in self.interest.paths():
            try:
                source.subscribe(path)
            except SubscriptionError as exc:
                LOGGER.warning("Not monitoring %s: %s", path, exc)
                last_error = exc
                continue
            LOGGER.debug("Subscribed to %s", path)
            subscribed.append(path)

        if not subscribed:
            if last_error is None:
                raise SubscriptionError("No device paths configured to monitor")
            if len(self.interest) > 1:
                raise SubscriptionError(
                    f"Could not subscribe to any configured device path: {last_error}"
                ) from last_error
            raise last_error
        return tuple(subscribed)

    def accept(self, event: ChangeEvent) -> list[FormattedPair]:
        pairs: list[FormattedPair] = []
        for name, raw in event.changed:
            if not self.interest.is_watched(event.device_path, name):
                LOGGER.debug("Ignoring unwatched %s on %s", name, event.device_path)
                continue
            spec = self.registry.lookup(name)
            if spec is None:
                continue
            try:
                display = format_value(spec, raw)
            except ValueKindError as exc:
                LOGGER.warning("Dropping %s on %s: %s", name, event.device_path, exc)
                continue
            pairs.append(FormattedPair(name=name, display_value=display))
        return pairs

    def handle(self, event: ChangeEvent) -> str | None:
        pairs = self.accept(event)
        if not pairs:
            return None
        line = build_line(event.device_path, pairs, self.config)
        self.sink.write_line(line)
        return line

    def run(self, events: Iterable[ChangeEvent]) -> int:
        written = 0
        for event in events:
            if self.handle(event) is not None:
                written += 1
        return written
