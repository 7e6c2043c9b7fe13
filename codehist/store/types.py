from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

RemoteType = Literal["local", "remote"]

# One element of the stored ``entries`` list. Folder records carry
# ``folderUri``; workspace and file records carry ``workspace``/``fileUri``.
RawHistoryRecord = dict[str, Any]

LOCAL_AUTHORITY = "local"


@dataclass(frozen=True)
class HistoryEntry:
    uri: str
    title: str
    remote_authority: str
    remote_type: RemoteType


@dataclass(frozen=True)
class IconSpec:
    name: str
    width: int
    height: int


@dataclass
class ResultMeta:
    id: str
    name: str
    description: str
    clipboard_text: str
    create_icon: Callable[[int], IconSpec]
