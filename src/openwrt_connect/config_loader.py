"""Config file discovery and loading."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from .config_parser import parse_config
from .constants import CONFIG_FILE_GLOB, CONFIG_HOME_ENV
from .logging_utils import log_event
from .models import Config, ConfigWarning, LoadedConfig, WarningKind
from .path_mapping import map_setting_path


def resolve_config_dir(
    environ: Mapping[str, str],
    *,
    cwd: Path,
    app_root_abs: Path,
) -> Path:
    raw = environ.get(CONFIG_HOME_ENV)
    if raw is None or raw.strip() == "":
        return cwd
    return map_setting_path(
        raw,
        setting_name=CONFIG_HOME_ENV,
        app_root_abs=app_root_abs,
        base_dir=cwd,
    )


def find_config_file(config_dir: Path) -> Path | None:
    """Return the first ``*.conf`` file in config_dir by name, if any."""
    candidates = sorted(
        (path for path in config_dir.glob(CONFIG_FILE_GLOB) if path.is_file()),
        key=lambda path: path.name,
    )
    return candidates[0] if candidates else None


def load_config(config_dir: Path) -> LoadedConfig:
    """Load the first config file in config_dir, falling back to defaults.

    A missing or unreadable file is reported as a warning, never raised.
    """
    config_path = find_config_file(config_dir)
    if config_path is None:
        log_event("config_not_found", level=logging.WARNING, config_dir=config_dir)
        return LoadedConfig(
            config=Config(),
            config_path=None,
            warnings=(
                ConfigWarning(
                    kind=WarningKind.CONFIG_NOT_FOUND,
                    message=(
                        f"No .conf file found in: {config_dir}. "
                        "Using built-in defaults."
                    ),
                    path=config_dir,
                ),
            ),
        )

    try:
        data = config_path.read_bytes()
    except OSError as exc:
        log_event(
            "config_unreadable",
            level=logging.WARNING,
            config_file=config_path,
            error=str(exc),
        )
        return LoadedConfig(
            config=Config(),
            config_path=config_path,
            warnings=(
                ConfigWarning(
                    kind=WarningKind.CONFIG_UNREADABLE,
                    message=(
                        f"Config file could not be read: {config_path}. "
                        "Using built-in defaults."
                    ),
                    path=config_path,
                ),
            ),
        )

    result = parse_config(data, base_dir=config_path.parent)
    log_event(
        "config_loaded",
        config_file=config_path,
        command_count=len(result.config.commands),
        warning_count=len(result.warnings),
    )
    return LoadedConfig(
        config=result.config,
        config_path=config_path,
        warnings=result.warnings,
    )
