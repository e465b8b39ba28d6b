"""Qt dialogs backing the map load/save confirmations and pickers."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from PySide6.QtWidgets import QFileDialog, QMessageBox, QWidget

from mapconfig.core.map_io import MAP_FILE_SUFFIXES, TypeMismatchChoice
from mapconfig.gui.config import cfg

OPEN_FILTER = (
    "Configuration file ("
    + " ".join(f"*{suffix}" for suffix in MAP_FILE_SUFFIXES)
    + ");;All Files (*)"
)
SAVE_FILTER = "JSON (*.map.json *.json);;mapconfig (*.mapconfig)"

_TYPE_CHOICES = {
    QMessageBox.StandardButton.Yes: TypeMismatchChoice.FORCE,
    QMessageBox.StandardButton.Ignore: TypeMismatchChoice.ADD_ANYWAY,
}


class QtMapDialogs:
    """Message boxes and file pickers used while loading and saving maps.

    Parameters
    ----------
    parent : QWidget | None
        Parent widget of the dialogs.

    Examples
    --------
    >>> dialogs = QtMapDialogs(window)  # doctest: +SKIP
    >>> load_map_from_file(
    ...     dialogs.pick_open_path,
    ...     dialogs.confirm_type_mismatch,
    ...     dialogs.confirm_redefine_base_path,
    ... )  # doctest: +SKIP
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        self.parent = parent

    def confirm_type_mismatch(self, map_type: str) -> TypeMismatchChoice:
        """Ask what to do with a configuration whose type is not a map."""
        reply = QMessageBox.warning(
            self.parent,
            'Type "map" not specified in configuration file',
            f"The type specified in the configuration is: {map_type}\n"
            "Trying to add this map could result in an error.\n\n"
            "Yes: set the type to map. Ignore: add it as it is.",
            QMessageBox.StandardButton.Cancel
            | QMessageBox.StandardButton.Yes
            | QMessageBox.StandardButton.Ignore,
            QMessageBox.StandardButton.Cancel,
        )
        choice = _TYPE_CHOICES.get(reply, TypeMismatchChoice.CANCEL)
        logger.debug(f"Type mismatch '{map_type}': {choice.value}")
        return choice

    def confirm_redefine_base_path(self, current: str, candidate: str) -> bool:
        """Ask whether the stored base path should point to ``candidate``."""
        if not cfg.get(cfg.confirmBasePath):
            return True
        reply = QMessageBox.question(
            self.parent,
            "Base path",
            f"Redefine the base path?\n\ncurrent base path: {current}\n"
            f"if redefined it will point to local directory {candidate}",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        return reply == QMessageBox.StandardButton.Yes

    def pick_open_path(self) -> str | None:
        """Pick a map configuration file to open."""
        file_path, _ = QFileDialog.getOpenFileName(
            self.parent,
            "Select a configuration file",
            cfg.get(cfg.lastDirectory),
            OPEN_FILTER,
        )
        return self._remember(file_path)

    def pick_save_path(self, map_name: str) -> str | None:
        """Pick the file a map is saved to."""
        file_path, _ = QFileDialog.getSaveFileName(
            self.parent,
            f"Save {map_name} map",
            cfg.get(cfg.lastDirectory),
            SAVE_FILTER,
        )
        return self._remember(file_path)

    def _remember(self, file_path: str) -> str | None:
        if not file_path:
            return None
        cfg.set(cfg.lastDirectory, str(Path(file_path).parent), save=False)
        return file_path
