"""Service layer used by the CLI and the public API."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from upmon.core.errors import ConfigurationError
from upmon.core.interest import InterestTable, parse_targets
from upmon.core.listener import ChangeListener
from upmon.core.model import OutputConfig, PropertySpec, WatchResult
from upmon.core.registry import PropertyRegistry, load_registry
from upmon.core.sink import OutputSink
from upmon.transports.base import NotificationSource
from upmon.transports.dbus import DBusNotificationSource, match_rule

LOGGER = logging.getLogger(__name__)


class MonitorService:
    def __init__(
        self,
        *,
        registry: PropertyRegistry | None = None,
        source_factory: Callable[[], NotificationSource] | None = None,
    ) -> None:
        self.registry = registry or load_registry()
        self._source_factory = source_factory or DBusNotificationSource

    def list_properties(self) -> list[PropertySpec]:
        return list(self.registry.specs())

    def build_interest(self, path_args: Sequence[str]) -> InterestTable:
        if not path_args:
            raise ConfigurationError(
                "No device paths configured. Use --path DEVICE_PATH:PROPERTY[,PROPERTY...]"
            )
        return InterestTable.from_targets(parse_targets(path_args), self.registry)

    def rules(self, path_args: Sequence[str]) -> list[str]:
        interest = self.build_interest(path_args)
        return [match_rule(path) for path in interest.paths()]

    def watch(self, path_args: Sequence[str], config: OutputConfig) -> WatchResult:
        """Monitor the configured paths until the source stops.

        Configuration is validated and the sink opened before any subscription
        is attempted. The sink is flushed and closed on every exit path.
        """
        interest = self.build_interest(path_args)
        with OutputSink.open(config.output_file) as sink:
            listener = ChangeListener(interest, self.registry, config, sink)
            source = self._source_factory()
            try:
                subscribed = listener.subscribe(source)
                source.install_signal_handlers()
                LOGGER.debug("Monitoring %d device path(s)", len(subscribed))
                written = listener.run(source.notifications())
            finally:
                source.close()
        return WatchResult(subscribed=subscribed, lines_written=written)
