"""CLI entry and startup wiring."""

from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path

from prompt_toolkit import prompt

from .config_loader import load_config, resolve_config_dir
from .constants import APP_NAME, LOG_FILE_ENV, SSH_DIR, USAGE
from .errors import KeySetupError, OpenwrtConnectError, UnknownCommandError
from .logging_utils import log_event, setup_logging
from .models import CommandDef, Config, RemoteFetch
from .network import detect_router_ip
from .path_mapping import map_setting_path
from .plan_builder import build_plan
from .presenters import (
    render_banner,
    render_command_list,
    render_config_warning_lines,
    render_error,
    render_result,
    render_target,
    render_unknown_command,
    render_warning,
)
from .registry import command_names, find_command
from .ssh_keys import (
    KeyPaths,
    ensure_ssh_key,
    key_paths,
    probe_key_auth,
    run_status,
    send_public_key,
)
from .transport import run_plan


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if args and args[0] in ("--help", "-h"):
        print(USAGE, end="")
        return 0
    if len(args) > 1:
        print(render_error("Expected at most one argument."))
        print(f"Run '{APP_NAME} --help' for usage.")
        return 1
    arg = args[0] if args else None
    if arg is not None and arg.startswith("-") and arg != "--list":
        print(render_error(f"Unknown option: {arg}"))
        print(f"Run '{APP_NAME} --help' for usage.")
        return 1

    app_root_abs = Path(__file__).resolve().parent
    cwd = Path.cwd()

    try:
        setup_logging(_log_file_from_env(app_root_abs=app_root_abs, cwd=cwd))
        config_dir = resolve_config_dir(os.environ, cwd=cwd, app_root_abs=app_root_abs)
        log_event("app_start", argv=args, config_dir=config_dir)

        loaded = load_config(config_dir)
        for line in render_config_warning_lines(loaded.warnings):
            print(line)

        if arg == "--list":
            for line in render_command_list(loaded.config, loaded.config_path):
                print(line)
            return 0

        command = _require_command(loaded.config, arg) if arg is not None else None
        exit_code = _connect(loaded.config, command)
    except UnknownCommandError as exc:
        for line in render_unknown_command(exc.name, exc.available):
            print(line)
        log_event("app_stop", level=logging.ERROR, reason="unknown_command", exit_code=1)
        return 1
    except OpenwrtConnectError as exc:
        print(render_error(str(exc)))
        log_event(
            "app_stop",
            level=logging.ERROR,
            reason="error",
            exit_code=1,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return 1
    except KeyboardInterrupt:
        print()
        print("Interrupted.")
        return 1

    log_event("app_stop", reason="done", exit_code=exit_code)
    return exit_code


def _log_file_from_env(*, app_root_abs: Path, cwd: Path) -> Path | None:
    raw = os.environ.get(LOG_FILE_ENV)
    if raw is None or raw.strip() == "":
        return None
    return map_setting_path(
        raw,
        setting_name=LOG_FILE_ENV,
        app_root_abs=app_root_abs,
        base_dir=cwd,
    )


def _require_command(config: Config, name: str) -> CommandDef:
    command = find_command(config, name)
    if command is None:
        raise UnknownCommandError(name, command_names(config))
    return command


def _connect(config: Config, command: CommandDef | None) -> int:
    for line in render_banner(config.product_name, command):
        print(line)
    print()

    address = _ask_address(detect_router_ip() or config.default_ip)
    paths = key_paths(config.ssh_key_prefix, address, _ssh_dir())
    key_ref = _prepare_key_auth(paths, address, config.ssh_user)

    cache_token = None
    if command is not None and isinstance(command.kind, RemoteFetch):
        cache_token = str(int(time.time()))
    plan = build_plan(
        command,
        address=address,
        user=config.ssh_user,
        key_ref=key_ref,
        cache_token=cache_token,
    )

    print()
    for line in render_target(config.ssh_user, address, command):
        print(line)
    print()
    print("Connecting..." if plan.is_interactive else "Connecting and executing command...")
    print()

    exit_code = run_plan(plan, run=run_status)
    if plan.is_interactive:
        return 0

    print()
    for line in render_result(exit_code):
        print(line)
    return 0 if exit_code == 0 else 1


def _prepare_key_auth(paths: KeyPaths, address: str, user: str) -> Path | None:
    """Return the key to use, or None to fall back to password login."""
    if not paths.private_key.is_file():
        print("Generating SSH key...")
    if not ensure_ssh_key(paths, run=run_status):
        print(render_warning("Could not generate an SSH key; using password login."))
        return None

    if probe_key_auth(paths, address, user, run=run_status):
        return paths.private_key

    print("Registering public key (password required once)...")
    print()
    if send_public_key(paths, address, user, run=run_status):
        return paths.private_key
    raise KeySetupError(f"Failed to register the public key on {address}.")


def _ask_address(default: str) -> str:
    try:
        entered = prompt(f"Enter OpenWrt IP address [{default}]: ")
    except EOFError:
        return default
    entered = entered.strip()
    return entered or default


def _ssh_dir() -> Path:
    return Path(SSH_DIR).expanduser()
