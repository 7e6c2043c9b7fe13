from __future__ import annotations

import contextlib
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from ..errors import MalformedHistoryData, StoreUnavailable
from .types import RawHistoryRecord

logger = logging.getLogger(__name__)

HISTORY_KEY = "history.recentlyOpenedPathsList"
HISTORY_QUERY = "SELECT value FROM ItemTable WHERE key = ?"


def connect_readonly(db_path: Path | str) -> sqlite3.Connection:
    path = Path(db_path).expanduser()
    if not path.is_file():
        raise StoreUnavailable(f"state database not found: {path}")
    try:
        # mode=ro never creates the file and refuses writes.
        return sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as exc:
        raise StoreUnavailable(f"cannot open state database: {path}") from exc


def _fetch_history_value(conn: sqlite3.Connection) -> Any:
    try:
        row = conn.execute(HISTORY_QUERY, (HISTORY_KEY,)).fetchone()
    except sqlite3.Error as exc:
        raise StoreUnavailable("history query failed") from exc
    if row is None:
        return None
    return row[0]


def parse_history_value(value: Any) -> list[RawHistoryRecord]:
    if isinstance(value, (bytes, bytearray, memoryview)):
        try:
            value = bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedHistoryData("history value is not utf-8") from exc
    if not isinstance(value, str):
        raise MalformedHistoryData(f"unexpected history value type: {type(value).__name__}")
    try:
        data = json.loads(value)
    except json.JSONDecodeError as exc:
        raise MalformedHistoryData("history value is not valid json") from exc
    if not isinstance(data, dict):
        raise MalformedHistoryData("history value must be an object")
    entries = data.get("entries")
    if not isinstance(entries, list):
        raise MalformedHistoryData("history value has no entries list")
    return [entry for entry in entries if isinstance(entry, dict)]


class HistoryStoreReader:
    """Read-only view of the editor's recently opened paths list.

    Every ``load_all`` call opens its own connection and closes it before
    returning. Store and parse failures are logged and degrade to an empty
    list; they never escape this class.
    """

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path).expanduser()

    def load_all(self) -> list[RawHistoryRecord]:
        try:
            conn = connect_readonly(self.db_path)
        except StoreUnavailable as exc:
            logger.warning("history store unavailable: %s", exc, exc_info=exc.__cause__)
            return []
        with contextlib.closing(conn):
            try:
                value = _fetch_history_value(conn)
                if value is None:
                    logger.debug("no %s row in %s", HISTORY_KEY, self.db_path)
                    return []
                return parse_history_value(value)
            except StoreUnavailable as exc:
                logger.warning("history store unavailable: %s", exc, exc_info=exc.__cause__)
                return []
            except MalformedHistoryData as exc:
                logger.warning("malformed history data: %s", exc, exc_info=exc.__cause__)
                return []
