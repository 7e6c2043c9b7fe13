from __future__ import annotations

from .matcher import filter_entries, record_matches, to_entry
from .reader import HISTORY_KEY, HistoryStoreReader, parse_history_value
from .types import HistoryEntry, IconSpec, RawHistoryRecord, RemoteType, ResultMeta

__all__ = [
    "HISTORY_KEY",
    "HistoryEntry",
    "HistoryStoreReader",
    "IconSpec",
    "RawHistoryRecord",
    "RemoteType",
    "ResultMeta",
    "filter_entries",
    "parse_history_value",
    "record_matches",
    "to_entry",
]
