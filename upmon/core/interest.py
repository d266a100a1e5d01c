"""Monitored target parsing and the per-path interest table."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from upmon.core.errors import ConfigurationError, DuplicatePathError, UnsupportedPropertyError
from upmon.core.model import MonitoredTarget
from upmon.core.registry import PropertyRegistry

TARGET_SEPARATOR = ":"


def parse_target(argument: str) -> MonitoredTarget:
    """Parse ``PATH:PROP[,PROP...]`` into a MonitoredTarget."""
    path, sep, props = argument.partition(TARGET_SEPARATOR)
    path = path.strip()
    if not sep:
        raise ConfigurationError(
            f"Invalid path argument '{argument}'. Expected DEVICE_PATH{TARGET_SEPARATOR}PROPERTY[,PROPERTY...]"
        )
    if not path:
        raise ConfigurationError(f"Missing device path in '{argument}'")
    names = tuple(name.strip() for name in props.split(",") if name.strip())
    if not names:
        raise ConfigurationError(
            f"Must specify one or more target properties to monitor for '{path}'"
        )
    return MonitoredTarget(device_path=path, properties=names)


def parse_targets(arguments: Iterable[str]) -> list[MonitoredTarget]:
    return [parse_target(argument) for argument in arguments]


class InterestTable:
    """Device path to watched property names, fixed once built."""

    def __init__(self, targets: Sequence[MonitoredTarget]) -> None:
        self.targets: tuple[MonitoredTarget, ...] = tuple(targets)
        self._watched: dict[str, frozenset[str]] = {
            target.device_path: frozenset(target.properties) for target in self.targets
        }

    @classmethod
    def from_targets(
        cls,
        targets: Iterable[MonitoredTarget],
        registry: PropertyRegistry,
    ) -> InterestTable:
        seen: set[str] = set()
        ordered: list[MonitoredTarget] = []
        for target in targets:
            if target.device_path in seen:
                raise DuplicatePathError(
                    f"Device path '{target.device_path}' is configured more than once"
                )
            seen.add(target.device_path)
            for name in target.properties:
                if registry.lookup(name) is None:
                    raise UnsupportedPropertyError(
                        f"Unexpected target property '{name}' for '{target.device_path}'. "
                        "Use --list-properties to see supported properties."
                    )
            ordered.append(target)
        return cls(ordered)

    def is_watched(self, device_path: str, name: str) -> bool:
        return name in self._watched.get(device_path, frozenset())

    def paths(self) -> tuple[str, ...]:
        return tuple(target.device_path for target in self.targets)

    def __len__(self) -> int:
        return len(self.targets)
