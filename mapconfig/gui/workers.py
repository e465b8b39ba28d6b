"""QThread workers for map file reading and export."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import traceback

from PySide6.QtCore import QObject, Signal, Slot
from loguru import logger

from mapconfig.core.map_io import export_configuration, read_map_document
from mapconfig.gui.config import cfg


@dataclass
class MapReadInput:
    """Input payload for map read worker."""

    file_path: str


class MapReadWorker(QObject):
    """Background worker reading and parsing a map file.

    Normalization needs user confirmations, so the parsed document is
    handed back and finished with ``build_loaded_map`` on the GUI thread.
    """

    sigFinished = Signal(object, str)
    sigFailed = Signal(str)

    def __init__(self, payload: MapReadInput) -> None:
        super().__init__()
        self.payload = payload

    @Slot()
    def run(self) -> None:
        """Read the map file and emit the parsed document."""
        try:
            document = read_map_document(self.payload.file_path)
        except Exception as exc:
            message = (
                f"Failed to read map '{self.payload.file_path}': "
                f"{format_worker_exception(exc)}"
            )
            logger.error(message)
            self.sigFailed.emit(message)
            return
        self.sigFinished.emit(document, self.payload.file_path)


@dataclass
class MapExportInput:
    """Input payload for map export worker.

    ``indent`` of None uses the ``Export/Indent`` setting.
    """

    configuration: dict[str, Any]
    target_path: str
    indent: int | None = None


class MapExportWorker(QObject):
    """Background worker writing a portable map configuration."""

    sigFinished = Signal(str)
    sigFailed = Signal(str)

    def __init__(self, payload: MapExportInput) -> None:
        super().__init__()
        self.payload = payload

    @Slot()
    def run(self) -> None:
        """Export the configuration and emit the written path."""
        indent = self.payload.indent
        if indent is None:
            indent = cfg.get(cfg.exportIndent)
        try:
            written = export_configuration(
                self.payload.configuration,
                self.payload.target_path,
                indent=indent,
            )
        except Exception as exc:
            message = (
                f"Failed to export map to '{self.payload.target_path}': "
                f"{format_worker_exception(exc)}"
            )
            logger.error(message)
            self.sigFailed.emit(message)
            return
        self.sigFinished.emit(str(written))


def format_worker_exception(exc: Exception) -> str:
    """Format exception into message with traceback details.

    Parameters
    ----------
    exc : Exception
        The exception to format.

    Returns
    -------
    str
        Formatted message with traceback text.
    """
    trace_text = traceback.format_exc()
    if not trace_text or trace_text == "NoneType: None\n":
        trace_text = "\n".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return f"{type(exc).__name__}: {exc}\n{trace_text.strip()}"
