from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Sequence
from typing import Literal

from .cancellation import CancelToken
from .errors import OperationCancelled, SearchCancelled
from .launcher import launch_editor
from .store.matcher import filter_entries
from .store.reader import HistoryStoreReader
from .store.types import HistoryEntry, IconSpec, ResultMeta

logger = logging.getLogger(__name__)

SearchState = Literal["idle", "searching", "completed", "cancelled"]

LOCAL_ICON = "folder"
REMOTE_ICON = "folder-remote"


def _icon_factory(entry: HistoryEntry, scale_factor: int) -> Callable[[int], IconSpec]:
    name = REMOTE_ICON if entry.remote_type == "remote" else LOCAL_ICON

    def create_icon(size: int) -> IconSpec:
        return IconSpec(name=name, width=size * scale_factor, height=size * scale_factor)

    return create_icon


class SearchSession:
    """Cancellable search over the editor's folder history.

    One session lives as long as its provider. It owns the cache of the
    most recent search's matches, keyed by uri; metadata lookups read it
    and never change it.
    """

    def __init__(
        self,
        reader: HistoryStoreReader,
        *,
        launch: Callable[[str], None] | None = None,
        scale_factor: int = 1,
    ) -> None:
        self._reader = reader
        self._launch = launch or functools.partial(launch_editor, "code")
        self.scale_factor = scale_factor
        self._entries: dict[str, HistoryEntry] = {}
        self._generation = 0
        self._pending = 0
        self.state: SearchState = "idle"
        self.last_outcome: SearchState | None = None

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries.values())

    def _begin(self) -> int:
        self._generation += 1
        self._pending += 1
        self.state = "searching"
        return self._generation

    def _finish(self, outcome: SearchState) -> None:
        self._pending -= 1
        self.last_outcome = outcome
        if self._pending == 0:
            self.state = "idle"

    async def _load_matches(self, terms: Sequence[str]) -> list[HistoryEntry]:
        records = await asyncio.to_thread(self._reader.load_all)
        return filter_entries(records, terms)

    async def initial_search(self, terms: Sequence[str], cancel: CancelToken) -> list[str]:
        terms = list(terms)
        generation = self._begin()
        loop = asyncio.get_running_loop()
        cancelled = asyncio.Event()
        outcome: SearchState = "cancelled"
        work = asyncio.ensure_future(self._load_matches(terms))
        try:
            with cancel.subscribe(lambda: loop.call_soon_threadsafe(cancelled.set)):
                waiter = asyncio.ensure_future(cancelled.wait())
                try:
                    await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
                finally:
                    waiter.cancel()
            if not work.done() or cancel.is_cancelled():
                if work.done() and not work.cancelled():
                    work.exception()
                logger.debug("search cancelled: %s", terms)
                return []
            outcome = "completed"
            try:
                entries = work.result()
            except Exception as exc:
                logger.warning("history search failed", exc_info=exc)
                return []
        finally:
            if not work.done():
                work.cancel()
            self._finish(outcome)

        cache: dict[str, HistoryEntry] = {}
        for entry in entries:
            cache[entry.uri] = entry
        if generation == self._generation:
            self._entries = cache
        else:
            # A newer search started while this one was loading; its
            # results own the cache.
            logger.debug("stale search completed, cache kept: %s", terms)
        return list(cache)

    async def subsearch(
        self,
        previous_results: Sequence[str],
        terms: Sequence[str],
        cancel: CancelToken,
    ) -> list[str]:
        if cancel.is_cancelled():
            raise SearchCancelled()
        # Re-query instead of narrowing previous_results.
        return await self.initial_search(terms, cancel)

    async def resolve_metas(
        self, identifiers: Sequence[str], cancel: CancelToken
    ) -> list[ResultMeta]:
        entries = self._entries
        metas: list[ResultMeta] = []
        for identifier in identifiers:
            if cancel.is_cancelled():
                raise OperationCancelled()
            entry = entries.get(identifier)
            if entry is None:
                continue
            metas.append(
                ResultMeta(
                    id=identifier,
                    name=entry.title,
                    description=entry.uri,
                    clipboard_text=entry.uri,
                    create_icon=_icon_factory(entry, self.scale_factor),
                )
            )
            await asyncio.sleep(0)
        if cancel.is_cancelled():
            raise OperationCancelled()
        return metas

    @staticmethod
    def truncate(identifiers: Sequence[str], max_results: int) -> list[str]:
        if len(identifiers) <= max_results:
            return list(identifiers)
        return list(identifiers[: max(max_results, 0)])

    def activate(self, identifier: str, terms: Sequence[str]) -> None:
        logger.debug("activate %s for %s", identifier, list(terms))
        try:
            self._launch(identifier)
        except Exception as exc:
            logger.warning("activate failed for %s", identifier, exc_info=exc)
