"""Map configuration loading and export."""

from __future__ import annotations

import copy
import datetime
import getpass
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from loguru import logger

from mapconfig.core.errors import ConfigParseError, MapIoError
from mapconfig.core.layer_types import URL_BEARING_KINDS
from mapconfig.core.locator import read_json_file
from mapconfig.core.map_normalizer import LayerIssue, normalize_map
from mapconfig.core.paths import containing_directory, derive_base_path

MAP_FILE_SUFFIXES: tuple[str, ...] = (".map.json", ".mapconfig", ".json", ".config")

# Per-layer keys that are regenerated on load and never persisted.
TRANSIENT_LAYER_FIELDS: tuple[str, ...] = ("basePath", "previewImageUrl")


class TypeMismatchChoice(str, Enum):
    """Answers to a map whose ``type`` does not mention ``map``."""

    CANCEL = "cancel"
    FORCE = "force"
    ADD_ANYWAY = "add_anyway"


ConfirmType = Callable[[str], TypeMismatchChoice]
ConfirmBasePath = Callable[[str, str], bool]


@dataclass
class LoadedMap:
    """Result of loading a map file.

    Parameters
    ----------
    configuration : dict[str, Any]
        Canonical map configuration merged over the defaults.
    file_path : str
        File the map was read from.
    issues : list[LayerIssue]
        Layers that were left out, with the reason.
    """

    configuration: dict[str, Any]
    file_path: str
    issues: list[LayerIssue] = field(default_factory=list)


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


def base_configuration(name: str = "new map") -> dict[str, Any]:
    """Return a fresh, empty map configuration.

    Examples
    --------
    >>> conf = base_configuration("survey")
    >>> conf["type"], conf["name"], conf["layers"]
    ('map', 'survey', {})
    """
    return {
        "type": "map",
        "name": name,
        "authors": _current_user(),
        "date": datetime.date.today().strftime("%a %b %d %Y"),
        "layers": {},
        "basePath": "",
    }


def create_map(name: str) -> dict[str, Any]:
    """Create a new empty map called ``name``."""
    configuration = base_configuration(name or "new map")
    logger.info(f"Created map '{configuration['name']}'")
    return configuration


def read_map_document(file_path: str | Path) -> dict[str, Any]:
    """Read and parse a map file.

    Raises
    ------
    MapIoError
        If the file cannot be read.
    ConfigParseError
        If the content is not a JSON object.
    """
    data = read_json_file(file_path)
    if not isinstance(data, dict):
        raise ConfigParseError(file_path, "map configuration must be an object")
    return data


def build_loaded_map(
    document: Mapping[str, Any],
    file_path: str | Path,
    confirm_type: ConfirmType | None = None,
    confirm_base_path: ConfirmBasePath | None = None,
) -> LoadedMap | None:
    """Turn a parsed map document into a canonical loaded map.

    Parameters
    ----------
    document : Mapping[str, Any]
        Parsed map file. Not modified.
    file_path : str | Path
        Location the document was read from.
    confirm_type : ConfirmType | None
        Asked when ``type`` does not contain ``"map"``. Without it the map
        is added as is.
    confirm_base_path : ConfirmBasePath | None
        Asked with ``(current, loaded_dir)`` when the document already has
        a base path; True redefines it to the loaded directory. Without it
        the loaded directory is used.

    Returns
    -------
    LoadedMap | None
        None when the user cancelled on a type mismatch.

    Raises
    ------
    ConfigParseError
        If ``basePath`` is present but not a string.
    """
    raw = dict(document)
    if not isinstance(raw.get("basePath") or "", str):
        raise ConfigParseError(file_path, "'basePath' must be a string")
    map_type = raw.get("type") or "undefined"
    raw["type"] = map_type
    if not isinstance(map_type, str) or "map" not in map_type:
        logger.warning(f"{file_path}: configuration type is '{map_type}', not a map")
        choice = TypeMismatchChoice.ADD_ANYWAY
        if confirm_type is not None:
            choice = confirm_type(str(map_type))
        if choice == TypeMismatchChoice.CANCEL:
            logger.info(f"Loading {file_path} cancelled")
            return None
        if choice == TypeMismatchChoice.FORCE:
            raw["type"] = "map"

    candidates = derive_base_path(raw.get("basePath"), str(file_path))
    redefine = True
    if candidates.needs_confirmation and candidates.current != candidates.loaded:
        if confirm_base_path is not None:
            redefine = bool(confirm_base_path(candidates.current, candidates.loaded))
    raw["basePath"] = candidates.choose(redefine)

    normalization = normalize_map(raw)
    for issue in normalization.issues:
        logger.warning(f"{file_path}: {issue}")

    configuration = {**base_configuration(), **normalization.configuration}
    configuration["new"] = True
    logger.info(
        f"Loaded map '{configuration.get('name')}' from {file_path} "
        f"({len(configuration['layers'])} layers)"
    )
    return LoadedMap(
        configuration=configuration,
        file_path=str(file_path),
        issues=normalization.issues,
    )


def load_map(
    file_path: str | Path,
    confirm_type: ConfirmType | None = None,
    confirm_base_path: ConfirmBasePath | None = None,
) -> LoadedMap | None:
    """Load a map file into a canonical configuration.

    Parameters
    ----------
    file_path : str | Path
        Map file to read.
    confirm_type, confirm_base_path
        Confirmation callables, see ``build_loaded_map``.

    Returns
    -------
    LoadedMap | None
        None when cancelled.

    Raises
    ------
    MapIoError
        If the file cannot be read.
    ConfigParseError
        If the file is not a JSON object.

    Examples
    --------
    >>> loaded = load_map("/maps/demo.map.json")  # doctest: +SKIP
    >>> loaded.configuration["basePath"]  # doctest: +SKIP
    '/maps/'
    """
    document = read_map_document(file_path)
    return build_loaded_map(document, file_path, confirm_type, confirm_base_path)


def load_map_from_file(
    pick_open_path: Callable[[], str | None],
    confirm_type: ConfirmType | None = None,
    confirm_base_path: ConfirmBasePath | None = None,
) -> LoadedMap | None:
    """Ask for a map file and load it. None when nothing was picked."""
    file_path = pick_open_path()
    if not file_path:
        return None
    return load_map(file_path, confirm_type, confirm_base_path)


def portable_configuration(
    configuration: Mapping[str, Any], target_path: str | Path
) -> dict[str, Any]:
    """Return a copy of ``configuration`` ready to be written at ``target_path``.

    Layer URLs below the target directory become relative, transient layer
    fields are dropped and local maps lose their ``basePath``.
    """
    conf = copy.deepcopy(dict(configuration))
    base_path = containing_directory(str(target_path))

    layers = conf.get("layers") or {}
    for key, layer in layers.items():
        if not isinstance(layer, dict):
            continue
        url = layer.get("url")
        if (
            base_path
            and layer.get("type") in URL_BEARING_KINDS
            and isinstance(url, str)
            and url.startswith(base_path)
        ):
            layer["url"] = url[len(base_path):]
            logger.debug(f"Layer '{key}': url made relative to {base_path}")
        for name in TRANSIENT_LAYER_FIELDS:
            layer.pop(name, None)

    if conf.get("source") == "local":
        conf.pop("basePath", None)
    return conf


def export_configuration(
    configuration: Mapping[str, Any],
    target_path: str | Path,
    indent: int | None = 2,
) -> Path:
    """Write a portable copy of ``configuration`` to ``target_path``.

    Parameters
    ----------
    configuration : Mapping[str, Any]
        Canonical map configuration. Not modified.
    target_path : str | Path
        Output JSON file.
    indent : int | None
        JSON indent, None for compact output.

    Returns
    -------
    pathlib.Path
        The written file.

    Raises
    ------
    MapIoError
        If the file cannot be written.
    """
    path = Path(target_path)
    conf = portable_configuration(configuration, target_path)
    try:
        content = json.dumps(conf, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise MapIoError(path, f"configuration is not serializable: {exc}") from exc
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise MapIoError(path, str(exc)) from exc
    logger.info(f"Exported map '{conf.get('name')}' to {path}")
    return path


def save_as(
    configuration: Mapping[str, Any],
    pick_save_path: Callable[[str], str | None],
    indent: int | None = 2,
) -> Path | None:
    """Ask for a target file and export ``configuration`` there."""
    target_path = pick_save_path(str(configuration.get("name", "")))
    if not target_path:
        logger.debug("Save cancelled")
        return None
    return export_configuration(configuration, target_path, indent=indent)
