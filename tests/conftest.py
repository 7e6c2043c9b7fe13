from __future__ import annotations

import json
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from codehist.config import CONFIG_ENV_OVERRIDES

StateDbFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _isolate_codehist_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for env_var in CONFIG_ENV_OVERRIDES.values():
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setenv("CODEHIST_CONFIG", str(tmp_path / "codehist-config.json"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def write_state_db(path: Path, value: Any = None, *, key: str = "history.recentlyOpenedPathsList") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        conn.execute("CREATE TABLE IF NOT EXISTS ItemTable (key TEXT UNIQUE ON CONFLICT REPLACE, value BLOB)")
        if value is not None:
            if isinstance(value, (dict, list)):
                value = json.dumps(value)
            conn.execute("INSERT INTO ItemTable (key, value) VALUES (?, ?)", (key, value))
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def state_db(tmp_path: Path) -> StateDbFactory:
    def factory(value: Any = None, **kwargs: Any) -> Path:
        return write_state_db(tmp_path / "globalStorage" / "state.vscdb", value, **kwargs)

    return factory
