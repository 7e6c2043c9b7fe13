from __future__ import annotations

import functools
import logging
from collections.abc import Sequence
from typing import Any

from .cancellation import CancelToken
from .config import CodehistConfig, resolve_state_db_path
from .launcher import launch_editor
from .session import SearchSession
from .store.reader import HistoryStoreReader
from .store.types import ResultMeta

logger = logging.getLogger(__name__)


class SearchProvider:
    """Host-facing search provider backed by a ``SearchSession``.

    Method names follow the shell search-provider contract. The host calls
    ``get_initial_result_set`` for a fresh query, may narrow it with
    ``get_subsearch_result_set``, truncates with ``filter_results`` and then
    asks for display metadata of the identifiers it shows.
    """

    def __init__(self, session: SearchSession, *, provider_id: str = "codehist@local") -> None:
        self.session = session
        self._id = provider_id

    @classmethod
    def from_config(cls, cfg: CodehistConfig) -> SearchProvider:
        reader = HistoryStoreReader(resolve_state_db_path(cfg))
        session = SearchSession(
            reader,
            launch=functools.partial(launch_editor, cfg.editor_command),
            scale_factor=cfg.icon_scale,
        )
        return cls(session, provider_id=cfg.provider_id)

    @property
    def app_info(self) -> None:
        return None

    @property
    def can_launch_search(self) -> bool:
        return False

    @property
    def id(self) -> str:
        return self._id

    def activate_result(self, result: str, terms: Sequence[str]) -> None:
        logger.debug("activate_result(%s, %s)", result, list(terms))
        self.session.activate(result, terms)

    def launch_search(self, terms: Sequence[str]) -> None:
        logger.debug("launch_search(%s)", list(terms))

    def create_result_object(self, meta: ResultMeta) -> Any:
        # None lets the host render the default result actor.
        logger.debug("create_result_object(%s)", meta.id)
        return None

    async def get_result_metas(
        self, results: Sequence[str], cancellable: CancelToken
    ) -> list[ResultMeta]:
        logger.debug("get_result_metas(%s)", list(results))
        return await self.session.resolve_metas(results, cancellable)

    async def get_initial_result_set(
        self, terms: Sequence[str], cancellable: CancelToken
    ) -> list[str]:
        logger.debug("get_initial_result_set(%s)", list(terms))
        return await self.session.initial_search(terms, cancellable)

    async def get_subsearch_result_set(
        self,
        results: Sequence[str],
        terms: Sequence[str],
        cancellable: CancelToken,
    ) -> list[str]:
        logger.debug("get_subsearch_result_set(%s, %s)", list(results), list(terms))
        return await self.session.subsearch(results, terms, cancellable)

    def filter_results(self, results: Sequence[str], max_results: int) -> list[str]:
        logger.debug("filter_results(%s, %d)", list(results), max_results)
        return self.session.truncate(results, max_results)
