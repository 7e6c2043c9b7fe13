from __future__ import annotations

import json
import os
import sys
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("~/.config/codehist/config.json").expanduser()

STATE_DB_RELATIVE = Path("User") / "globalStorage" / "state.vscdb"

CONFIG_ENV_OVERRIDES = {
    "editor_dir": "CODEHIST_EDITOR_DIR",
    "editor_command": "CODEHIST_EDITOR_COMMAND",
    "state_db_path": "CODEHIST_STATE_DB",
    "provider_id": "CODEHIST_PROVIDER_ID",
    "max_results": "CODEHIST_MAX_RESULTS",
    "icon_scale": "CODEHIST_ICON_SCALE",
}

_INT_KEYS = {"max_results", "icon_scale"}


def get_config_path(path: Path | None = None) -> Path:
    candidate = path or Path(os.getenv("CODEHIST_CONFIG", DEFAULT_CONFIG_PATH))
    return candidate.expanduser()


def read_config_file(path: Path | None = None) -> dict[str, Any]:
    config_path = get_config_path(path)
    if not config_path.exists():
        return {}
    raw = config_path.read_text()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("invalid config json") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be an object")
    return data


def get_env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, env_var in CONFIG_ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value is not None:
            overrides[key] = value
    return overrides


@dataclass
class CodehistConfig:
    # Directory name the editor uses under the user config dir
    # ("Code", "Code - Insiders", "VSCodium", ...).
    editor_dir: str = "Code"
    editor_command: str = "code"
    state_db_path: str | None = None
    provider_id: str = "codehist@local"
    max_results: int = 10
    icon_scale: int = 1


def _parse_int(value: object, default: int, *, key: str) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    if parsed < 1:
        warnings.warn(f"Invalid int for {key}: {value!r}", RuntimeWarning, stacklevel=2)
        return default
    return parsed


def _coerce_str(value: object, default: str | None, *, key: str) -> str | None:
    if value is None:
        return default
    if isinstance(value, str) and value.strip():
        return value.strip()
    warnings.warn(f"Invalid string for {key}: {value!r}", RuntimeWarning, stacklevel=2)
    return default


def load_config(path: Path | None = None) -> CodehistConfig:
    cfg = CodehistConfig()
    config_path = get_config_path(path)
    if config_path.exists():
        try:
            data = read_config_file(config_path)
        except ValueError as exc:
            warnings.warn(f"Invalid config file {config_path}: {exc}", RuntimeWarning, stacklevel=2)
            data = {}
        cfg = _apply_dict(cfg, data)
    cfg = _apply_env(cfg)
    return cfg


def _apply_dict(cfg: CodehistConfig, data: dict[str, Any]) -> CodehistConfig:
    for key, value in data.items():
        if not hasattr(cfg, key):
            continue
        if key in _INT_KEYS:
            setattr(cfg, key, _parse_int(value, getattr(cfg, key), key=key))
            continue
        setattr(cfg, key, _coerce_str(value, getattr(cfg, key), key=key))
    return cfg


def _apply_env(cfg: CodehistConfig) -> CodehistConfig:
    overrides = get_env_overrides()
    for key, value in overrides.items():
        if key in _INT_KEYS:
            setattr(cfg, key, _parse_int(value, getattr(cfg, key), key=key))
            continue
        setattr(cfg, key, _coerce_str(value, getattr(cfg, key), key=key))
    return cfg


def user_config_dir() -> Path:
    if sys.platform.startswith("darwin"):
        return Path.home() / "Library" / "Application Support"
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser()
    return Path.home() / ".config"


def resolve_state_db_path(cfg: CodehistConfig) -> Path:
    if cfg.state_db_path:
        return Path(cfg.state_db_path).expanduser()
    return user_config_dir() / cfg.editor_dir / STATE_DB_RELATIVE
