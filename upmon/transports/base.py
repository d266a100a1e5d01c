"""Notification source interfaces."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from upmon.core.model import ChangeEvent


class NotificationSource(Protocol):
    def subscribe(self, device_path: str) -> None:
        """Start receiving property changes for a device path.

        Raises SubscriptionError when the device cannot be subscribed to.
        """

    def install_signal_handlers(self) -> None:
        """Stop the notification stream on process shutdown signals."""

    def notifications(self) -> Iterator[ChangeEvent]:
        """Yield change events in arrival order until the source is stopped."""

    def stop(self) -> None:
        """End the notification stream after the current event."""

    def close(self) -> None:
        """Release the underlying connection."""
