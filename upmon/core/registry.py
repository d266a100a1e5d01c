"""Property catalog loading and lookup for UPower device properties."""

from __future__ import annotations

import json
import logging
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from upmon.core.errors import CatalogLoadError, CatalogValidationError
from upmon.core.model import PropertySpec, ValueKind

LOGGER = logging.getLogger(__name__)

_CATALOG_NAME = "upower_device.yaml"


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# Labels such as "Off" must stay strings.
for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[Any, Any]:
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise CatalogValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


class PropertyRegistry:
    """Read-only mapping from property name to its kind and formatting rule."""

    def __init__(self, specs: list[PropertySpec], interface: str = "") -> None:
        self.interface = interface
        self._specs: dict[str, PropertySpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise CatalogValidationError(f"Property '{spec.name}' is defined more than once")
            self._specs[spec.name] = spec

    def lookup(self, name: str) -> PropertySpec | None:
        return self._specs.get(name)

    def list_supported(self) -> tuple[str, ...]:
        return tuple(self._specs)

    def specs(self) -> tuple[PropertySpec, ...]:
        return tuple(self._specs.values())

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)


def _load_schema_validator() -> Any:
    schema_text = resources.files("upmon.schemas").joinpath("catalog.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogLoadError(f"Could not read property catalog {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise CatalogValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise CatalogValidationError(f"Property catalog {path} must contain a mapping at root")
    return loaded


def _normalize_labels(raw: dict[Any, str], *, context: str) -> dict[int, str]:
    labels: dict[int, str] = {}
    for code, label in raw.items():
        if isinstance(code, bool) or not isinstance(code, int):
            raise CatalogValidationError(f"{context} label code '{code}' must be an integer")
        if code < 0:
            raise CatalogValidationError(f"{context} label code {code} must not be negative")
        labels[code] = label
    return labels


def _build_registry(doc: dict[str, Any], source: Path | Traversable) -> PropertyRegistry:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise CatalogValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    specs: list[PropertySpec] = []
    for name, entry in doc["properties"].items():
        kind = ValueKind(entry["kind"])
        labels: dict[int, str] = {}
        if kind is ValueKind.ENUM:
            labels = _normalize_labels(entry["labels"], context=name)
        elif "labels" in entry:
            raise CatalogValidationError(f"{name} declares labels but is of kind '{kind.value}'")
        specs.append(
            PropertySpec(
                name=str(name),
                kind=kind,
                labels=labels,
                fallback=entry.get("fallback", "Unknown"),
                description=entry.get("description", ""),
            )
        )

    LOGGER.debug("Loaded %d properties for %s from %s", len(specs), doc["interface"], source)
    return PropertyRegistry(specs, interface=doc["interface"])


def load_registry(path: Path | Traversable | None = None) -> PropertyRegistry:
    """Load the property catalog, defaulting to the one packaged with upmon."""
    source = path if path is not None else resources.files("upmon.catalog").joinpath(_CATALOG_NAME)
    return _build_registry(_read_yaml(source), source)
