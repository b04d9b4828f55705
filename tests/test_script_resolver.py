from pathlib import Path

from openwrt_connect.models import CommandDef, Config, DirectCommand, Script, WarningKind
from openwrt_connect.script_resolver import resolve_script_files


def test_resolver_uses_injected_reader_and_leaves_other_commands() -> None:
    config = Config(
        commands=(
            CommandDef(name="a", kind=Script(file_ref="./a.sh")),
            CommandDef(name="b", kind=Script(body="inline")),
            CommandDef(name="c", kind=DirectCommand(command_line="uptime")),
        )
    )
    reads: list[Path] = []

    def fake_read(path: Path) -> str:
        reads.append(path)
        return "echo from file\n"

    result = resolve_script_files(config, base_dir=Path("/etc/owrt"), read_text=fake_read)

    assert reads == [Path("/etc/owrt/a.sh")]
    assert result.config.commands[0].kind == Script(
        body="echo from file\n", file_ref="./a.sh"
    )
    assert result.config.commands[1:] == config.commands[1:]
    assert result.warnings == ()


def test_resolver_does_not_mutate_input() -> None:
    config = Config(commands=(CommandDef(name="a", kind=Script(file_ref="./a.sh")),))

    resolve_script_files(config, base_dir=Path("/x"), read_text=lambda _path: "body")

    assert config.commands[0].kind == Script(file_ref="./a.sh")


def test_resolver_warns_on_read_failure(tmp_path: Path) -> None:
    config = Config(
        commands=(
            CommandDef(name="a", kind=Script(file_ref="./missing.sh")),
            CommandDef(name="b", kind=Script(file_ref="./present.sh")),
        )
    )
    (tmp_path / "present.sh").write_text("echo ok\n", encoding="utf-8")

    result = resolve_script_files(config, base_dir=tmp_path)

    assert result.config.commands[0].kind == Script(body="", file_ref="./missing.sh")
    assert result.config.commands[1].kind == Script(body="echo ok\n", file_ref="./present.sh")
    assert len(result.warnings) == 1
    warning = result.warnings[0]
    assert warning.kind is WarningKind.SCRIPT_FILE_MISSING
    assert warning.command == "a"
    assert "missing.sh" in warning.message
