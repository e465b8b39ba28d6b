"""Exception hierarchy for map configuration handling."""

from __future__ import annotations

from pathlib import Path


class MapConfigError(Exception):
    """Base class for map configuration failures."""


class MapIoError(MapConfigError):
    """A map or layer file could not be read or written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"I/O error on '{self.path}': {reason}")


class ConfigParseError(MapConfigError):
    """A configuration file is not valid JSON or has the wrong shape."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Invalid configuration '{self.path}': {reason}")


class MalformedLayerError(MapConfigError):
    """A layer configuration cannot be classified."""

    def __init__(self, layer_key: str | None, reason: str) -> None:
        self.layer_key = layer_key
        self.reason = reason
        label = layer_key if layer_key is not None else "<unnamed>"
        super().__init__(f"Malformed layer '{label}': {reason}")


class ConfigNotFoundError(MapConfigError):
    """A layer referenced by name has no resolvable configuration file."""

    def __init__(self, directory: str | Path, name: str, reason: str) -> None:
        self.directory = str(directory)
        self.name = name
        self.reason = reason
        super().__init__(
            f"No configuration for layer '{name}' in '{self.directory}': {reason}"
        )
