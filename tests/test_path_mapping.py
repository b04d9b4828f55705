from pathlib import Path

import pytest

from openwrt_connect.errors import PathMappingError
from openwrt_connect.path_mapping import map_setting_path

APP_ROOT = Path("/opt/openwrt_connect").resolve()


def _map(raw: str, base_dir: Path) -> Path:
    return map_setting_path(
        raw, setting_name="TEST_DIR", app_root_abs=APP_ROOT, base_dir=base_dir
    )


def test_absolute_path_is_kept(tmp_path: Path) -> None:
    assert _map(str(tmp_path / "conf"), Path("/elsewhere")) == (tmp_path / "conf").resolve()


def test_relative_path_joins_base_dir(tmp_path: Path) -> None:
    assert _map("a/../b", tmp_path) == (tmp_path / "b").resolve()


def test_app_root_prefix(tmp_path: Path) -> None:
    assert _map("@/configs", tmp_path) == (APP_ROOT / "configs").resolve()
    assert _map("@", tmp_path) == APP_ROOT


def test_home_prefix(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))

    assert _map("~/owrt", Path("/elsewhere")) == (tmp_path / "owrt").resolve()


@pytest.mark.parametrize("raw", ["", "   ", "a\0b", "\\rooted", "C:relative"])
def test_invalid_values_raise(raw: str, tmp_path: Path) -> None:
    with pytest.raises(PathMappingError):
        _map(raw, tmp_path)
