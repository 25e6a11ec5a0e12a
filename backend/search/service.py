"""
Per-request search orchestration: capability check, compile, execute, and the
degradation policy when the engine fails mid-request.
"""

from __future__ import annotations

import logging

from .compiler import compile_query
from .engine import EngineCapability
from .executor import SearchExecutor, SearchOutcome
from .filter_state import FilterState

logger = logging.getLogger(__name__)


class SearchService:
    def __init__(
        self,
        executor: SearchExecutor,
        capability: EngineCapability,
        degrade_on_unavailable: bool = True,
    ):
        self.executor = executor
        self.capability = capability
        self.degrade_on_unavailable = degrade_on_unavailable

    def search(self, state: FilterState) -> SearchOutcome:
        engine_available = self.capability.is_available()
        outcome = self.executor.execute(compile_query(state, engine_available))
        if outcome.failure is None:
            return outcome

        self.capability.mark_unavailable(outcome.failure.reason)
        if not self.degrade_on_unavailable:
            return outcome

        logger.info("↩️ Retrying search in fallback mode")
        degraded = self.executor.execute(compile_query(state, engine_available=False))
        degraded.degraded_from = outcome.failure
        return degraded
