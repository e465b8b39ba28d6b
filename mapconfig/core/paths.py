"""Path and URL helpers for map base paths."""

from __future__ import annotations

from dataclasses import dataclass
import os
import posixpath
import re

_ABSOLUTE_PREFIXES = ("http:", "https:", "file:")
_DRIVE_RE = re.compile(r"^[A-Za-z]:")
_LOCAL_PREFIXES = ("/home", "file://")


def is_absolute(text: str) -> bool:
    """Return True when ``text`` needs no base path.

    Parameters
    ----------
    text : str
        URL template or filesystem path.

    Returns
    -------
    bool
        True for ``http:``, ``https:`` and ``file:`` URLs and for
        OS-absolute paths.

    Examples
    --------
    >>> is_absolute("http://tiles.example.org/{z}/{x}/{y}.png")
    True
    >>> is_absolute("tiles/{z}/{x}/{y}.png")
    False
    """
    return text.startswith(_ABSOLUTE_PREFIXES) or os.path.isabs(text)


def _is_url(text: str) -> bool:
    return "://" in text


def join_path(base_path: str, relative: str) -> str:
    """Join ``relative`` onto ``base_path``.

    URL bases are joined with ``/`` regardless of platform.
    """
    if not base_path:
        return relative
    if _is_url(base_path):
        return posixpath.join(base_path, relative)
    return os.path.join(base_path, relative)


def resolve_url(base_path: str, raw: str) -> str:
    """Resolve a layer URL against the owning map base path.

    Parameters
    ----------
    base_path : str
        Directory or URL prefix of the map. May be empty.
    raw : str
        URL as written in the configuration.

    Returns
    -------
    str
        ``raw`` when it is absolute or already starts with ``base_path``,
        otherwise ``base_path`` joined with ``raw``.

    Examples
    --------
    >>> resolve_url("/maps/", "tiles/{z}/{x}/{y}.png")
    '/maps/tiles/{z}/{x}/{y}.png'
    >>> resolve_url("/maps/", "/maps/tiles/x.png")
    '/maps/tiles/x.png'
    """
    if is_absolute(raw):
        return raw
    if raw.startswith(base_path):
        return raw
    return join_path(base_path, raw)


def containing_directory(file_path: str | os.PathLike | None) -> str:
    """Return the directory part of ``file_path`` with its trailing separator.

    Examples
    --------
    >>> containing_directory("/maps/demo.map.json")
    '/maps/'
    >>> containing_directory("demo.map.json")
    ''
    """
    if not file_path:
        return ""
    text = os.fspath(file_path)
    separators = [os.sep] + ([os.altsep] if os.altsep else [])
    cut = max(text.rfind(sep) for sep in separators)
    return text[: cut + 1]


@dataclass(frozen=True)
class BasePathChoice:
    """Candidate base paths for a freshly loaded map.

    Parameters
    ----------
    current : str
        Base path stored in the configuration, empty when absent.
    loaded : str
        Directory of the file the configuration was loaded from.
    """

    current: str
    loaded: str

    @property
    def needs_confirmation(self) -> bool:
        """True when the stored base path could be replaced."""
        return bool(self.current)

    def choose(self, redefine: bool) -> str:
        """Pick the loaded directory when ``redefine`` is True."""
        if not self.current or redefine:
            return self.loaded
        return self.current


def derive_base_path(
    existing_base_path: str | None,
    loaded_file_path: str | os.PathLike | None,
) -> BasePathChoice:
    """Build base path candidates for a loaded map.

    Parameters
    ----------
    existing_base_path : str | None
        ``basePath`` value found in the configuration.
    loaded_file_path : str | os.PathLike | None
        Location the configuration was read from.

    Returns
    -------
    BasePathChoice
        Both candidates. Without an existing base path the loaded
        directory is the only sensible value.
    """
    return BasePathChoice(
        current=existing_base_path or "",
        loaded=containing_directory(loaded_file_path),
    )


def classify_source(base_path: str | None, fallback: str | None = None) -> str:
    """Classify a map as ``local`` or ``remote`` from its base path.

    Parameters
    ----------
    base_path : str | None
        Map base path.
    fallback : str | None
        Previously stored ``source`` used when no prefix rule applies.

    Returns
    -------
    str
        ``"remote"`` for ``http`` prefixes, ``"local"`` for home
        directories, ``file://`` URLs and drive letters, else
        ``fallback`` or ``"local"``.
    """
    if base_path:
        if base_path.startswith("http"):
            return "remote"
        if base_path.startswith(_LOCAL_PREFIXES) or _DRIVE_RE.match(base_path):
            return "local"
    return fallback or "local"
