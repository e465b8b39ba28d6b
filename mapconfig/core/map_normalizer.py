"""Normalization of a whole map configuration.

Legacy map files spread their layers over several collection fields and
may reference a layer by the name of a sub-directory instead of
embedding it. ``normalize_map`` folds all of them into one canonical
``layers`` mapping.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from mapconfig.core.errors import ConfigParseError, MalformedLayerError, MapConfigError
from mapconfig.core.layer_normalizer import normalize_layer, require_layer_type
from mapconfig.core.locator import find_layer_config
from mapconfig.core.paths import classify_source, join_path

# (map field, group label), processed in this order. Later fields win on
# key collisions.
LEGACY_LAYER_FIELDS: tuple[tuple[str, str], ...] = (
    ("layers", "layers"),
    ("tilesLayers", "tiles"),
    ("tileLayers", "tiles"),
    ("pointsLayers", "points"),
    ("pixelsLayers", "pixels"),
    ("guideLayers", "guide"),
    ("gridLayers", "grid"),
    ("polygons", "polygons"),
    ("regions", "regions"),
)

# Removed from the map once its layers are collected.
OBSOLETE_MAP_FIELDS: tuple[str, ...] = tuple(
    name for name, _ in LEGACY_LAYER_FIELDS if name != "layers"
) + ("author",)


@dataclass(frozen=True)
class InlineLayer:
    """Layer embedded in the map file."""

    key: str
    field: str
    config: Mapping[str, Any]


@dataclass(frozen=True)
class FileReference:
    """Layer referenced by the name of a directory below the base path."""

    key: str
    field: str
    name: str


LayerSource = InlineLayer | FileReference


@dataclass(frozen=True)
class LayerIssue:
    """Problem with one layer that was left out of the map.

    Parameters
    ----------
    key : str
        Layer key in the map.
    field : str
        Map field the layer came from.
    error : MapConfigError
        What went wrong.
    """

    key: str
    field: str
    error: MapConfigError

    def __str__(self) -> str:
        return f"{self.field}.{self.key}: {self.error}"


@dataclass
class MapNormalization:
    """Canonical map configuration plus per-layer issues."""

    configuration: dict[str, Any]
    issues: list[LayerIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


class _NameCounter:
    """Counter for generated layer names, shared by one normalization pass."""

    def __init__(self) -> None:
        self.value = 0

    def name_for(self, layer_type: str) -> str:
        name = f"{layer_type}_{self.value}"
        self.value += 1
        return name


def _field_items(value: Any) -> Iterator[tuple[str, Any]]:
    """Yield ``(key, value)`` pairs of a layer collection field."""
    if isinstance(value, Mapping):
        yield from ((str(key), item) for key, item in value.items())
    elif isinstance(value, list):
        yield from ((str(idx), item) for idx, item in enumerate(value))
    else:
        raise MalformedLayerError(
            None, f"layer collection must be an object or list, got {type(value).__name__}"
        )


def layer_source(key: str, field_name: str, value: Any) -> LayerSource:
    """Classify a raw collection entry as inline or file reference."""
    if isinstance(value, str):
        return FileReference(key=key, field=field_name, name=value)
    if isinstance(value, Mapping):
        return InlineLayer(key=key, field=field_name, config=value)
    raise MalformedLayerError(
        key, f"expected an object or a layer name, got {type(value).__name__}"
    )


def iter_layer_sources(
    raw: Mapping[str, Any], issues: list[LayerIssue]
) -> Iterator[LayerSource]:
    """Walk every legacy layer field of ``raw`` in processing order.

    Entries that cannot be classified are appended to ``issues``.
    """
    for field_name, group in LEGACY_LAYER_FIELDS:
        value = raw.get(field_name)
        if value is None:
            continue
        try:
            items = list(_field_items(value))
        except MalformedLayerError as exc:
            issues.append(LayerIssue(key="*", field=field_name, error=exc))
            continue
        logger.debug(f"Collecting {len(items)} {group} layer(s) from '{field_name}'")
        for key, item in items:
            try:
                yield layer_source(key, field_name, item)
            except MalformedLayerError as exc:
                issues.append(LayerIssue(key=key, field=field_name, error=exc))


def resolve_layer_source(
    source: LayerSource, base_path: str
) -> tuple[Mapping[str, Any] | None, str]:
    """Return the raw layer configuration and the base path for its URL.

    A file reference whose configuration has no string ``type`` resolves
    to ``None`` and is dropped by the caller.
    """
    if isinstance(source, InlineLayer):
        return source.config, base_path
    directory = join_path(base_path, source.name)
    config = find_layer_config(directory, source.name)
    if not isinstance(config.get("type"), str):
        logger.debug(f"Layer '{source.key}': no typed configuration in {directory}, skipped")
        return None, directory
    return config, directory


def normalize_map(raw: Mapping[str, Any]) -> MapNormalization:
    """Build the canonical form of a map configuration.

    Parameters
    ----------
    raw : Mapping[str, Any]
        Map configuration as parsed from JSON. Not modified.

    Returns
    -------
    MapNormalization
        New configuration with ``source`` classified, every layer in
        ``layers`` and no legacy collection fields, plus the issues of
        layers that had to be left out.

    Raises
    ------
    ConfigParseError
        If the map-level ``basePath`` is not a string.

    Examples
    --------
    >>> result = normalize_map({"tilesLayers": {"a": {"type": "tilesLayer"}}})
    >>> result.configuration["layers"]
    {'a': {'type': 'tileLayer', 'name': 'tilesLayer_0'}}
    """
    configuration = copy.deepcopy(dict(raw))
    base_path = configuration.get("basePath") or ""
    if not isinstance(base_path, str):
        raise ConfigParseError("<map>", "'basePath' must be a string")
    configuration["source"] = classify_source(base_path, configuration.get("source"))

    issues: list[LayerIssue] = []
    counter = _NameCounter()
    layers: dict[str, Any] = {}

    for source in iter_layer_sources(raw, issues):
        try:
            config, layer_base = resolve_layer_source(source, base_path)
            if config is None:
                continue
            layer_type = require_layer_type(config, source.key)
            config = dict(config)
            if not config.get("name"):
                config["name"] = counter.name_for(layer_type)
            layers[source.key] = normalize_layer(config, layer_base, source.key)
        except MapConfigError as exc:
            logger.warning(f"Layer '{source.key}' from '{source.field}' skipped: {exc}")
            issues.append(LayerIssue(key=source.key, field=source.field, error=exc))

    for name in OBSOLETE_MAP_FIELDS:
        configuration.pop(name, None)
    configuration["layers"] = layers
    return MapNormalization(configuration=configuration, issues=issues)
