from __future__ import annotations


class CodehistError(Exception):
    pass


class StoreUnavailable(CodehistError):
    """The editor's state database could not be opened or queried."""


class MalformedHistoryData(CodehistError):
    """The stored history value is not the JSON shape we expect."""


class SearchCancelled(CodehistError):
    def __init__(self, message: str = "Search Cancelled") -> None:
        super().__init__(message)


class OperationCancelled(CodehistError):
    def __init__(self, message: str = "Operation Cancelled") -> None:
        super().__init__(message)
