from pathlib import Path

import pytest

from openwrt_connect.config_loader import find_config_file, load_config, resolve_config_dir
from openwrt_connect.constants import CONFIG_HOME_ENV
from openwrt_connect.errors import PathMappingError
from openwrt_connect.models import Config, Script, WarningKind


def test_find_config_file_picks_first_by_name(tmp_path: Path) -> None:
    (tmp_path / "b.conf").write_text("", encoding="utf-8")
    (tmp_path / "a.conf").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    (tmp_path / "dir.conf").mkdir()

    assert find_config_file(tmp_path) == tmp_path / "a.conf"


def test_find_config_file_returns_none_when_absent(tmp_path: Path) -> None:
    assert find_config_file(tmp_path) is None
    assert find_config_file(tmp_path / "missing") is None


def test_load_config_without_file_uses_defaults(tmp_path: Path) -> None:
    loaded = load_config(tmp_path)

    assert loaded.config == Config()
    assert loaded.config_path is None
    assert [w.kind for w in loaded.warnings] == [WarningKind.CONFIG_NOT_FOUND]
    assert str(tmp_path) in loaded.warnings[0].message


def test_load_config_resolves_scripts_next_to_config(tmp_path: Path) -> None:
    (tmp_path / "router.conf").write_text(
        "[general]\nproduct_name = Lab\n[command.setup]\nscript = ./setup.sh\n",
        encoding="utf-8",
    )
    (tmp_path / "setup.sh").write_text("opkg update\n", encoding="utf-8")

    loaded = load_config(tmp_path)

    assert loaded.config_path == tmp_path / "router.conf"
    assert loaded.config.product_name == "Lab"
    assert loaded.config.commands[0].kind == Script(body="opkg update\n", file_ref="./setup.sh")
    assert loaded.warnings == ()


def test_resolve_config_dir_defaults_to_cwd(tmp_path: Path) -> None:
    assert resolve_config_dir({}, cwd=tmp_path, app_root_abs=Path("/app")) == tmp_path
    assert (
        resolve_config_dir({CONFIG_HOME_ENV: "  "}, cwd=tmp_path, app_root_abs=Path("/app"))
        == tmp_path
    )


def test_resolve_config_dir_maps_environment_value(tmp_path: Path) -> None:
    environ = {CONFIG_HOME_ENV: "conf"}

    result = resolve_config_dir(environ, cwd=tmp_path, app_root_abs=Path("/app"))

    assert result == (tmp_path / "conf").resolve()


def test_resolve_config_dir_rejects_nul() -> None:
    with pytest.raises(PathMappingError):
        resolve_config_dir(
            {CONFIG_HOME_ENV: "bad\0path"}, cwd=Path("/tmp"), app_root_abs=Path("/app")
        )
