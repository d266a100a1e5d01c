"""System bus notification source built on dasbus and the GLib main context."""

from __future__ import annotations

import logging
import signal
from collections import deque
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Any

from upmon.core.errors import (
    SubscriptionError,
    TransportConnectError,
    TransportDisconnectedError,
)
from upmon.core.model import ChangeEvent

LOGGER = logging.getLogger(__name__)

UPOWER_SERVICE = "org.freedesktop.UPower"
DEVICE_INTERFACE = "org.freedesktop.UPower.Device"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"
PROPERTIES_CHANGED = "PropertiesChanged"


def match_rule(device_path: str) -> str:
    """Return the D-Bus match rule selecting property changes for ``device_path``."""
    return (
        f"type='signal',interface='{PROPERTIES_INTERFACE}',"
        f"member='{PROPERTIES_CHANGED}',path='{device_path}'"
    )


@dataclass(frozen=True)
class BusRuntime:
    """The pieces of dasbus and GLib the source needs."""

    bus: Any
    context: Any
    to_native: Callable[[Any], Any]
    errors: tuple[type[BaseException], ...]
    watch_signal: Callable[[int, Callable[[], bool]], Any]


def load_system_bus_runtime() -> BusRuntime:
    try:
        from dasbus.connection import SystemMessageBus  # type: ignore
        from dasbus.error import DBusError  # type: ignore
        from dasbus.typing import get_native  # type: ignore
        from gi.repository import GLib  # type: ignore
    except Exception as exc:  # pragma: no cover - import failure path
        raise TransportConnectError(
            "System bus monitoring requires 'dasbus' and PyGObject. Install dependencies and retry."
        ) from exc

    def _watch_signal(signum: int, handler: Callable[[], bool]) -> Any:
        return GLib.unix_signal_add(GLib.PRIORITY_HIGH, signum, handler)

    return BusRuntime(
        bus=SystemMessageBus(),
        context=GLib.MainContext.default(),
        to_native=get_native,
        errors=(DBusError, GLib.Error),
        watch_signal=_watch_signal,
    )


class DBusNotificationSource:
    """Yields PropertiesChanged signals for subscribed UPower devices.

    Signal callbacks only enqueue events. ``notifications()`` is the single
    suspension point: it blocks in one GLib main context iteration at a time and
    hands queued events to the caller in arrival order, so nothing runs
    concurrently with the consumer.
    """

    def __init__(self, runtime: BusRuntime | None = None) -> None:
        self._runtime = runtime
        self._connected = False
        self._pending: deque[ChangeEvent] = deque()
        self._proxies: dict[str, Any] = {}
        self._stopped = False
        self._disconnect_reason: str | None = None

    def _ensure_connected(self) -> BusRuntime:
        if self._runtime is None:
            self._runtime = load_system_bus_runtime()
        runtime = self._runtime
        if not self._connected:
            try:
                connection = runtime.bus.connection
            except runtime.errors as exc:
                raise TransportConnectError(f"Could not connect to the system bus: {exc}") from exc
            connection.connect("closed", self._on_connection_closed)
            self._connected = True
        return runtime

    def subscribe(self, device_path: str) -> None:
        runtime = self._ensure_connected()
        if device_path in self._proxies:
            return
        errors = runtime.errors + (AttributeError,)
        try:
            # Proxies are lazy; reading a Device property fails for absent objects.
            device = runtime.bus.get_proxy(UPOWER_SERVICE, device_path, interface_name=DEVICE_INTERFACE)
            device.Type
            proxy = runtime.bus.get_proxy(UPOWER_SERVICE, device_path)
            getattr(proxy, PROPERTIES_CHANGED).connect(
                partial(self._on_properties_changed, device_path)
            )
        except errors as exc:
            raise SubscriptionError(f"Could not subscribe to {device_path}: {exc}") from exc
        self._proxies[device_path] = proxy

    def install_signal_handlers(self, signums: Sequence[int] = (signal.SIGINT, signal.SIGTERM)) -> None:
        runtime = self._ensure_connected()
        for signum in signums:
            runtime.watch_signal(signum, self._on_shutdown_signal)

    def notifications(self) -> Iterator[ChangeEvent]:
        runtime = self._ensure_connected()
        while True:
            if self._pending:
                yield self._pending.popleft()
                continue
            if self._stopped:
                return
            if self._disconnect_reason is not None:
                raise TransportDisconnectedError(
                    f"Lost connection to the system bus: {self._disconnect_reason}"
                )
            runtime.context.iteration(True)

    def stop(self) -> None:
        self._stopped = True
        if self._runtime is not None:
            self._runtime.context.wakeup()

    def close(self) -> None:
        self._stopped = True
        self._pending.clear()
        if self._connected and self._runtime is not None:
            self._runtime.bus.disconnect()
            self._connected = False
        self._proxies.clear()

    def _on_properties_changed(
        self,
        device_path: str,
        interface: str,
        changed: dict[str, Any],
        invalidated: list[str],
    ) -> None:
        if interface != DEVICE_INTERFACE:
            LOGGER.debug("Ignoring %s property changes on %s", interface, device_path)
            return
        native = self._runtime.to_native(changed) if self._runtime is not None else changed
        self._pending.append(ChangeEvent(device_path=device_path, changed=tuple(native.items())))

    def _on_connection_closed(self, connection: Any, remote_peer_vanished: bool, error: Any) -> None:
        self._disconnect_reason = str(error) if error is not None else "connection closed"
        LOGGER.debug("System bus connection closed (remote vanished: %s)", remote_peer_vanished)

    def _on_shutdown_signal(self) -> bool:
        LOGGER.debug("Shutdown signal received")
        self.stop()
        return False
