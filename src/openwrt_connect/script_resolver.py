"""Load file-referenced script bodies from disk."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .logging_utils import log_event
from .models import CommandDef, Config, ConfigWarning, ParseResult, Script, WarningKind


def read_script_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def resolve_script_files(
    config: Config,
    *,
    base_dir: Path,
    read_text: Callable[[Path], str] = read_script_file,
) -> ParseResult:
    """Return a copy of config with every ``./`` script body filled in.

    Unreadable files leave the body empty and produce a warning; the command
    stays registered.
    """
    commands: list[CommandDef] = []
    warnings: list[ConfigWarning] = []

    for command in config.commands:
        kind = command.kind
        if not isinstance(kind, Script) or kind.file_ref is None:
            commands.append(command)
            continue

        script_path = base_dir / kind.file_ref
        try:
            body = read_text(script_path)
        except OSError as exc:
            log_event(
                "script_file_missing",
                level=logging.WARNING,
                command=command.name,
                path=script_path,
                error=str(exc),
            )
            warnings.append(
                ConfigWarning(
                    kind=WarningKind.SCRIPT_FILE_MISSING,
                    message=f"Script file not found for '{command.name}': {script_path}",
                    command=command.name,
                    path=script_path,
                )
            )
            body = ""

        resolved_kind = kind.model_copy(update={"body": body})
        commands.append(command.model_copy(update={"kind": resolved_kind}))

    return ParseResult(
        config=config.model_copy(update={"commands": tuple(commands)}),
        warnings=tuple(warnings),
    )
