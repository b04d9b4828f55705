"""User-facing text rendering."""

from __future__ import annotations

from pathlib import Path

from .constants import BANNER_RULE, ERROR_PREFIX, LIST_PREVIEW_WIDTH, WARNING_PREFIX
from .models import CommandDef, Config, ConfigWarning, DirectCommand, RemoteFetch, Script
from .registry import describe_command

_NAME_WIDTH = 12


def render_error(message: str) -> str:
    return f"{ERROR_PREFIX} {message}"


def render_warning(message: str) -> str:
    return f"{WARNING_PREFIX} {message}"


def render_config_warning_lines(warnings: tuple[ConfigWarning, ...]) -> list[str]:
    return [render_warning(warning.message) for warning in warnings]


def render_banner(product_name: str, command: CommandDef | None) -> list[str]:
    if command is None:
        title = "SSH Connection"
    else:
        title = command.label or command.name
    return [BANNER_RULE, f"{product_name} - {title}", BANNER_RULE]


def render_command_list(config: Config, config_path: Path | None) -> list[str]:
    source = config_path.name if config_path is not None else "built-in defaults"
    lines = [f"Available commands ({source}):", ""]
    if not config.commands:
        lines.append("  (none)")
        return lines

    for command in config.commands:
        label = f" {command.label}" if command.label else ""
        lines.append(f"  {command.name:<{_NAME_WIDTH}} [{describe_command(command)}]{label}")
        for detail in _detail_lines(command):
            lines.append(f"  {'':<{_NAME_WIDTH}} {detail}")
        lines.append("")
    return lines


def render_unknown_command(name: str, available: list[str]) -> list[str]:
    lines = [render_error(f"Unknown command: {name}"), ""]
    if available:
        lines.append("Available commands:")
        lines.extend(f"  {command_name}" for command_name in available)
    else:
        lines.append("No commands are defined.")
    lines.append("")
    lines.append("Use --help for more information.")
    return lines


def render_target(user: str, address: str, command: CommandDef | None) -> list[str]:
    lines = [f"Target: {user}@{address}"]
    if command is not None:
        lines.append(f"Command: {command.name}")
    return lines


def render_result(exit_code: int) -> list[str]:
    status = (
        "Completed successfully"
        if exit_code == 0
        else "Failed - Please check the error messages"
    )
    return [BANNER_RULE, status, BANNER_RULE]


def _detail_lines(command: CommandDef) -> list[str]:
    kind = command.kind
    if isinstance(kind, RemoteFetch):
        lines = [f"url: {_preview(kind.url)}"]
        if kind.install_dir is not None:
            lines.append(f"dir: {kind.install_dir}")
        if kind.bin_path is not None:
            lines.append(f"bin: {kind.bin_path}")
        return lines
    if isinstance(kind, DirectCommand):
        return [f"cmd: {_preview(kind.command_line)}"]
    if isinstance(kind, Script):
        if kind.file_ref is not None:
            return [f"file: {kind.file_ref}"]
        return [f"script: {_preview(kind.body)}"]
    return []


def _preview(text: str) -> str:
    first_line = text.strip().splitlines()[0] if text.strip() else ""
    more = len(text.strip().splitlines()) > 1
    if len(first_line) > LIST_PREVIEW_WIDTH:
        return first_line[: LIST_PREVIEW_WIDTH - 3] + "..."
    return first_line + (" ..." if more else "")
