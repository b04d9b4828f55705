"""Per-router SSH key generation and registration."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .constants import KEY_PROBE_TIMEOUT_SEC, SSH_BINARY, SSH_KEYGEN_BINARY, SSH_OPTIONS
from .errors import SshNotFoundError

StatusRunner = Callable[..., int]

# Appends the key on stdin to dropbear's and OpenSSH's authorized_keys.
_REGISTER_KEY_SCRIPT = (
    "[ -f /etc/openwrt_release ] || "
    "{ echo 'ERROR: Not an OpenWrt device. Aborting.'; exit 1; }; "
    "cat > /tmp/.pubkey_tmp; "
    "[ -d /etc/dropbear ] && cat /tmp/.pubkey_tmp >> /etc/dropbear/authorized_keys"
    " && chmod 600 /etc/dropbear/authorized_keys; "
    "[ -d /root/.ssh ] && cat /tmp/.pubkey_tmp >> /root/.ssh/authorized_keys"
    " && chmod 600 /root/.ssh/authorized_keys; "
    "rm -f /tmp/.pubkey_tmp"
)


@dataclass(frozen=True)
class KeyPaths:
    ssh_dir: Path
    private_key: Path
    public_key: Path


def key_paths(prefix: str, address: str, ssh_dir: Path) -> KeyPaths:
    """Return ``<ssh_dir>/<prefix>_<address with dots as underscores>_rsa``."""
    key_name = f"{prefix}_{address.replace('.', '_')}_rsa"
    return KeyPaths(
        ssh_dir=ssh_dir,
        private_key=ssh_dir / key_name,
        public_key=ssh_dir / f"{key_name}.pub",
    )


def run_status(argv: list[str], *, input_text: str | None = None) -> int:
    try:
        completed = subprocess.run(argv, input=input_text, text=True, check=False)
    except FileNotFoundError as exc:
        raise SshNotFoundError(f"Executable not found: {argv[0]}") from exc
    return completed.returncode


def ensure_ssh_key(paths: KeyPaths, *, run: StatusRunner = run_status) -> bool:
    """Generate the key pair unless the private key already exists."""
    if paths.private_key.is_file():
        return True
    paths.ssh_dir.mkdir(parents=True, exist_ok=True)
    argv = [SSH_KEYGEN_BINARY, "-t", "rsa", "-N", "", "-f", str(paths.private_key)]
    return run(argv) == 0


def probe_key_auth(
    paths: KeyPaths,
    address: str,
    user: str,
    *,
    run: StatusRunner = run_status,
) -> bool:
    argv = [
        SSH_BINARY,
        *SSH_OPTIONS,
        "-o", "BatchMode=yes",
        "-o", f"ConnectTimeout={KEY_PROBE_TIMEOUT_SEC}",
        "-i", str(paths.private_key),
        f"{user}@{address}",
        "exit",
    ]
    return run(argv) == 0


def send_public_key(
    paths: KeyPaths,
    address: str,
    user: str,
    *,
    run: StatusRunner = run_status,
) -> bool:
    """Append the public key to the router's authorized_keys (asks for a password)."""
    try:
        public_key = paths.public_key.read_text(encoding="utf-8")
    except OSError:
        return False
    argv = [SSH_BINARY, *SSH_OPTIONS, f"{user}@{address}", _REGISTER_KEY_SCRIPT]
    return run(argv, input_text=public_key) == 0
