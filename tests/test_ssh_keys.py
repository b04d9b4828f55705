from pathlib import Path

import pytest

from openwrt_connect.errors import SshNotFoundError
from openwrt_connect.ssh_keys import (
    ensure_ssh_key,
    key_paths,
    probe_key_auth,
    run_status,
    send_public_key,
)


class RecordingRunner:
    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.calls: list[tuple[list[str], str | None]] = []

    def __call__(self, argv: list[str], *, input_text: str | None = None) -> int:
        self.calls.append((argv, input_text))
        return self.exit_code


def test_key_paths_embed_prefix_and_address(tmp_path: Path) -> None:
    paths = key_paths("owrt-connect", "192.168.1.1", tmp_path)

    assert paths.ssh_dir == tmp_path
    assert paths.private_key == tmp_path / "owrt-connect_192_168_1_1_rsa"
    assert paths.public_key == tmp_path / "owrt-connect_192_168_1_1_rsa.pub"


def test_ensure_ssh_key_skips_existing_key(tmp_path: Path) -> None:
    paths = key_paths("p", "10.0.0.1", tmp_path)
    paths.private_key.write_text("key", encoding="utf-8")
    runner = RecordingRunner()

    assert ensure_ssh_key(paths, run=runner)
    assert runner.calls == []


def test_ensure_ssh_key_runs_keygen_and_creates_dir(tmp_path: Path) -> None:
    paths = key_paths("p", "10.0.0.1", tmp_path / ".ssh")
    runner = RecordingRunner()

    assert ensure_ssh_key(paths, run=runner)
    assert paths.ssh_dir.is_dir()
    argv, _ = runner.calls[0]
    assert argv[0] == "ssh-keygen"
    assert argv[-2:] == ["-f", str(paths.private_key)]


def test_ensure_ssh_key_reports_keygen_failure(tmp_path: Path) -> None:
    paths = key_paths("p", "10.0.0.1", tmp_path)
    assert not ensure_ssh_key(paths, run=RecordingRunner(exit_code=1))


def test_probe_key_auth_uses_batch_mode(tmp_path: Path) -> None:
    paths = key_paths("p", "10.0.0.1", tmp_path)
    runner = RecordingRunner()

    assert probe_key_auth(paths, "10.0.0.1", "root", run=runner)
    argv, _ = runner.calls[0]
    assert "BatchMode=yes" in argv
    assert argv[-2:] == ["root@10.0.0.1", "exit"]


def test_send_public_key_pipes_key_to_ssh(tmp_path: Path) -> None:
    paths = key_paths("p", "10.0.0.1", tmp_path)
    paths.public_key.write_text("ssh-rsa AAAA test\n", encoding="utf-8")
    runner = RecordingRunner()

    assert send_public_key(paths, "10.0.0.1", "root", run=runner)
    argv, input_text = runner.calls[0]
    assert input_text == "ssh-rsa AAAA test\n"
    assert argv[-2] == "root@10.0.0.1"
    assert "authorized_keys" in argv[-1]


def test_send_public_key_without_public_key_fails(tmp_path: Path) -> None:
    paths = key_paths("p", "10.0.0.1", tmp_path)
    runner = RecordingRunner()

    assert not send_public_key(paths, "10.0.0.1", "root", run=runner)
    assert runner.calls == []


def test_run_status_missing_executable_raises() -> None:
    with pytest.raises(SshNotFoundError):
        run_status(["openwrt-connect-definitely-missing-binary"])
