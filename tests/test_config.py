from __future__ import annotations

from pathlib import Path

import pytest

from codehist.config import (
    CodehistConfig,
    get_config_path,
    get_env_overrides,
    load_config,
    read_config_file,
    resolve_state_db_path,
    user_config_dir,
)


def test_read_config_file_rejects_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{not-json}")
    with pytest.raises(ValueError, match="invalid config json"):
        read_config_file(config_path)


def test_read_config_file_rejects_non_object(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("[1, 2]")
    with pytest.raises(ValueError, match="config must be an object"):
        read_config_file(config_path)


def test_read_config_file_missing_or_blank_is_empty(tmp_path: Path) -> None:
    assert read_config_file(tmp_path / "missing.json") == {}
    blank = tmp_path / "blank.json"
    blank.write_text("  \n")
    assert read_config_file(blank) == {}


def test_get_config_path_uses_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CODEHIST_CONFIG", str(tmp_path / "custom.json"))
    assert get_config_path() == tmp_path / "custom.json"


def test_load_config_defaults_without_file() -> None:
    assert load_config() == CodehistConfig()


def test_load_config_reads_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text(
        '{"editor_dir": "VSCodium", "editor_command": "codium", "max_results": 3, "unknown": 1}\n'
    )

    cfg = load_config(config_path)

    assert cfg.editor_dir == "VSCodium"
    assert cfg.editor_command == "codium"
    assert cfg.max_results == 3


def test_load_config_warns_and_uses_defaults_on_invalid_json(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text("{broken-json")

    with pytest.warns(RuntimeWarning, match="Invalid config file"):
        cfg = load_config(config_path)

    assert cfg == CodehistConfig()


def test_load_config_invalid_value_warns(tmp_path: Path) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text('{"max_results": "lots", "editor_command": 7}\n')

    with pytest.warns(RuntimeWarning, match="max_results"):
        cfg = load_config(config_path)

    assert cfg.max_results == 10
    assert cfg.editor_command == "code"


def test_env_overrides_win_over_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.json"
    config_path.write_text('{"editor_command": "codium", "max_results": 3}\n')
    monkeypatch.setenv("CODEHIST_EDITOR_COMMAND", "code-insiders")
    monkeypatch.setenv("CODEHIST_MAX_RESULTS", "7")

    cfg = load_config(config_path)

    assert cfg.editor_command == "code-insiders"
    assert cfg.max_results == 7
    assert get_env_overrides() == {"editor_command": "code-insiders", "max_results": "7"}


def test_invalid_int_env_does_not_crash_and_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CODEHIST_ICON_SCALE", "0")
    with pytest.warns(RuntimeWarning, match="icon_scale"):
        cfg = load_config()
    assert cfg.icon_scale == 1


def test_state_db_path_follows_xdg_on_linux(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("codehist.config.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    path = resolve_state_db_path(CodehistConfig(editor_dir="Code - Insiders"))

    assert path == tmp_path / "xdg" / "Code - Insiders" / "User" / "globalStorage" / "state.vscdb"


def test_state_db_path_defaults_to_dot_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("codehist.config.sys.platform", "linux")
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert user_config_dir() == tmp_path / ".config"


def test_state_db_path_on_macos(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("codehist.config.sys.platform", "darwin")
    monkeypatch.setenv("HOME", str(tmp_path))

    assert user_config_dir() == tmp_path / "Library" / "Application Support"


def test_explicit_state_db_path_wins(tmp_path: Path) -> None:
    cfg = CodehistConfig(state_db_path=str(tmp_path / "x.vscdb"))

    assert resolve_state_db_path(cfg) == tmp_path / "x.vscdb"
