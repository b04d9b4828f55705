"""Command lookup over a loaded Config."""

from __future__ import annotations

from .models import CommandDef, Config, DirectCommand, RemoteFetch, Script


def find_command(config: Config, name: str) -> CommandDef | None:
    """Return the first command named exactly ``name``."""
    for command in config.commands:
        if command.name == name:
            return command
    return None


def command_names(config: Config) -> list[str]:
    return [command.name for command in config.commands]


def describe_command(command: CommandDef) -> str:
    """Short type label used in listings."""
    kind = command.kind
    if isinstance(kind, Script):
        return "script file" if kind.is_file_ref else "script"
    if isinstance(kind, RemoteFetch):
        return "url"
    if isinstance(kind, DirectCommand):
        return "cmd"
    return "ssh"
