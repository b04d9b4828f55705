"""Assemble the ssh invocation for a command without running anything.

Script and remote-fetch commands are gated: the install step only runs when
``command -v <name>`` fails on the router, and ``<name>`` is always invoked
afterwards. Direct commands are sent as written.

A remote fetch downloads to ``/tmp/<name>.sh`` unless the command sets an
install directory (``dir``), in which case the file keeps the name from the URL.
With a wrapper path (``bin``) the install step writes a small script there that
fetches and runs the latest version on every call.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit

from .constants import REMOTE_FETCH_DIR, SSH_BINARY, SSH_OPTIONS
from .logging_utils import log_event
from .models import CommandDef, DirectCommand, InteractiveSession, RemoteFetch, Script


@dataclass(frozen=True)
class ExecutionPlan:
    command_name: str | None
    target: str
    key_ref: Path | None
    remote_command: str | None

    @property
    def is_interactive(self) -> bool:
        return self.remote_command is None

    def ssh_argv(
        self,
        ssh_binary: str = SSH_BINARY,
        options: Sequence[str] = SSH_OPTIONS,
    ) -> list[str]:
        argv = [ssh_binary, *options]
        if self.key_ref is not None:
            argv += ["-i", str(self.key_ref)]
        argv += ["-tt", self.target]
        if self.remote_command is not None:
            argv.append(self.remote_command)
        return argv


def build_plan(
    command: CommandDef | None,
    *,
    address: str,
    user: str,
    key_ref: Path | None = None,
    cache_token: str | None = None,
) -> ExecutionPlan:
    """Build the plan for command, or an interactive session when command is None.

    ``cache_token`` is appended to remote-fetch URLs as ``t=<token>`` when given.
    """
    remote_command = None if command is None else remote_command_for(
        command, cache_token=cache_token
    )
    plan = ExecutionPlan(
        command_name=None if command is None else command.name,
        target=f"{user}@{address}",
        key_ref=key_ref,
        remote_command=remote_command,
    )
    log_event(
        "plan_built",
        level=logging.INFO,
        command=plan.command_name,
        target=plan.target,
        kind="interactive" if command is None else command.kind.type,
        use_key=key_ref is not None,
    )
    return plan


def remote_command_for(command: CommandDef, *, cache_token: str | None = None) -> str | None:
    kind = command.kind
    if isinstance(kind, InteractiveSession):
        return None
    if isinstance(kind, Script):
        return _gated(command.name, _script_block(kind.body))
    if isinstance(kind, RemoteFetch):
        if kind.bin_path is not None:
            return _gated(command.name, _wrapper_block(command.name, kind, kind.bin_path))
        return _gated(command.name, _fetch_block(command.name, kind, cache_token))
    if isinstance(kind, DirectCommand):
        return kind.command_line
    raise TypeError(f"Unsupported command kind: {type(kind).__name__}")


def remote_script_name(name: str, url: str) -> str:
    """Last path segment of url without its query, or ``<name>.sh``."""
    segment = urlsplit(url).path.rsplit("/", 1)[-1]
    return segment or f"{name}.sh"


def _gated(name: str, install_block: str) -> str:
    return f"command -v {name} >/dev/null 2>&1 || {install_block}; {name}"


def _script_block(body: str) -> str:
    # A newline before '}' lets the body end with a comment or a bare command.
    script = body.rstrip() or ":"
    return f"{{ {script}\n}}"


def _fetch_block(name: str, kind: RemoteFetch, cache_token: str | None) -> str:
    if kind.install_dir is None:
        local_path = shlex.quote(f"{REMOTE_FETCH_DIR}/{name}.sh")
        mkdir = ""
    else:
        local_path = shlex.quote(_install_path(name, kind))
        mkdir = f"mkdir -p {shlex.quote(kind.install_dir)} && "
    fetch_url = _with_cache_token(kind.url, cache_token)
    return (
        f"{{ {mkdir}wget --no-check-certificate -O {local_path} {shlex.quote(fetch_url)}"
        f" && chmod +x {local_path} && {local_path}; }}"
    )


def _wrapper_block(name: str, kind: RemoteFetch, bin_path: str) -> str:
    # The wrapper stays on the router and re-downloads on every run.
    install_dir = kind.install_dir or REMOTE_FETCH_DIR
    script_path = shlex.quote(_install_path(name, kind))
    separator = "&" if "?" in kind.url else "?"
    wrapper = (
        "#!/bin/sh",
        f"mkdir -p {shlex.quote(install_dir)}",
        f"wget --no-check-certificate -O {script_path} "
        f'{shlex.quote(kind.url)}"{separator}t=$(date +%s)"',
        f"chmod +x {script_path}",
        f'sh {script_path} "$@"',
    )
    target = shlex.quote(bin_path)
    lines = " ".join(shlex.quote(line) for line in wrapper)
    return f"{{ printf '%s\\n' {lines} > {target} && chmod +x {target}; }}"


def _install_path(name: str, kind: RemoteFetch) -> str:
    install_dir = (kind.install_dir or REMOTE_FETCH_DIR).rstrip("/")
    return f"{install_dir}/{remote_script_name(name, kind.url)}"


def _with_cache_token(url: str, cache_token: str | None) -> str:
    if cache_token is None:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}t={cache_token}"
