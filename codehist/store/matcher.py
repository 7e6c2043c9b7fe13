from __future__ import annotations

from collections.abc import Iterable, Sequence

from .types import LOCAL_AUTHORITY, HistoryEntry, RawHistoryRecord


def _str_field(record: RawHistoryRecord, key: str) -> str | None:
    value = record.get(key)
    return value if isinstance(value, str) else None


def record_matches(record: RawHistoryRecord, terms: Sequence[str]) -> bool:
    folder_uri = _str_field(record, "folderUri")
    if folder_uri is None:
        return False
    if not terms:
        return True
    label = _str_field(record, "label")
    for term in terms:
        if label is not None and term in label:
            return True
        if term in folder_uri:
            return True
    return False


def to_entry(record: RawHistoryRecord) -> HistoryEntry:
    folder_uri = record["folderUri"]
    remote = _str_field(record, "remoteAuthority")
    return HistoryEntry(
        uri=folder_uri,
        title=_str_field(record, "label") or folder_uri,
        remote_authority=remote or LOCAL_AUTHORITY,
        remote_type="remote" if remote else "local",
    )


def filter_entries(records: Iterable[RawHistoryRecord], terms: Sequence[str]) -> list[HistoryEntry]:
    """Folder records whose label or uri contains any term, in input order.

    Matching is case-sensitive substring containment. Empty ``terms`` keeps
    every folder record; workspace and file records are always dropped.
    """
    return [to_entry(record) for record in records if record_matches(record, terms)]
