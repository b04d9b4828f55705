"""Mapping of path settings taken from the environment."""

from __future__ import annotations

import re
import unicodedata
from pathlib import Path

from .errors import PathMappingError

_WINDOWS_DRIVE_RELATIVE_RE = re.compile(r"^[A-Za-z]:[^/\\]")
_SEPARATORS_RE = re.compile(r"[\\/]+")


def map_setting_path(
    raw: str,
    *,
    setting_name: str,
    app_root_abs: Path,
    base_dir: Path,
) -> Path:
    """Map an environment path value to an absolute resolved Path.

    ``~`` expands to the home directory, ``@`` to the installed package
    directory, and relative values are joined onto base_dir.
    """
    value = unicodedata.normalize("NFC", raw.strip())
    if value == "":
        raise PathMappingError(f"{setting_name} is empty.")
    if "\0" in value:
        raise PathMappingError(f"{setting_name} contains NUL (\\0).")
    if _is_windows_rooted_not_fully_qualified(value):
        raise PathMappingError(
            f"{setting_name} uses an unsupported Windows rooted-not-qualified path."
        )

    if value.startswith("~"):
        try:
            mapped = Path(_SEPARATORS_RE.sub("/", value)).expanduser()
        except RuntimeError as exc:
            raise PathMappingError(
                f"Failed to expand user home in {setting_name}: {value}"
            ) from exc
    elif value.startswith("@"):
        segments = [s for s in _SEPARATORS_RE.split(value[1:]) if s]
        mapped = app_root_abs.joinpath(*segments)
    else:
        mapped = Path(value)

    if not mapped.is_absolute():
        mapped = base_dir / mapped
    return mapped.resolve(strict=False)


def _is_windows_rooted_not_fully_qualified(path_text: str) -> bool:
    if path_text.startswith("\\") and not path_text.startswith("\\\\"):
        return True
    return _WINDOWS_DRIVE_RELATIVE_RE.match(path_text) is not None
