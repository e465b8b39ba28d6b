"""Persistent user settings for map loading and export."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from qfluentwidgets import (
    BoolValidator,
    ConfigItem,
    QConfig,
    RangeConfigItem,
    RangeValidator,
    qconfig,
)


class MapIOConfig(QConfig):
    """
    Settings shared by map dialogs and workers.
    """

    # Directory last used by an open/save picker
    lastDirectory = ConfigItem("Files", "LastDirectory", "")

    # JSON indent of exported maps
    exportIndent = RangeConfigItem("Export", "Indent", 2, RangeValidator(0, 8))

    # Ask before replacing a stored base path with the loaded directory
    confirmBasePath = ConfigItem("Load", "ConfirmBasePath", True, BoolValidator())


cfg = MapIOConfig()


def load_settings(file_path: str | Path) -> MapIOConfig:
    """Load settings from ``file_path`` into the global ``cfg``."""
    qconfig.load(str(file_path), cfg)
    logger.debug(f"Settings loaded from {file_path}")
    return cfg
