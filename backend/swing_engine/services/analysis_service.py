"""Analysis service - fetches a snapshot and runs the engine, with caching."""

from __future__ import annotations

import asyncio
import logging
import time

from swing_engine.analysis.analyzer import AnalysisOrchestrator
from swing_engine.config.settings import settings
from swing_engine.models.schemas import AnalysisResult
from swing_engine.services.alpha_vantage import AlphaVantageClient

logger = logging.getLogger(__name__)


class AnalysisService:
    """Analyzes symbols on demand.

    Results are cached per symbol for ``cache_ttl`` seconds, and concurrent
    requests for the same symbol share one upstream fetch.
    """

    def __init__(
        self,
        client: AlphaVantageClient | None = None,
        analyzer: AnalysisOrchestrator | None = None,
        cache_ttl: float | None = None,
    ):
        self.client = client or AlphaVantageClient()
        self.analyzer = analyzer or AnalysisOrchestrator()
        self.cache_ttl = settings.cache_ttl_seconds if cache_ttl is None else cache_ttl
        self._cache: dict[str, AnalysisResult] = {}
        self._cache_time: dict[str, float] = {}
        self._inflight: dict[str, asyncio.Task] = {}

    async def analyze_symbol(self, symbol: str) -> AnalysisResult:
        symbol = symbol.strip().upper()
        self._evict_expired(time.monotonic())
        if symbol in self._cache:
            logger.debug(f"Cache hit for {symbol}")
            return self._cache[symbol]

        task = self._inflight.get(symbol)
        if task is None:
            task = asyncio.ensure_future(self._run(symbol))
            self._inflight[symbol] = task
            task.add_done_callback(lambda _: self._inflight.pop(symbol, None))
        return await asyncio.shield(task)

    async def _run(self, symbol: str) -> AnalysisResult:
        logger.info(f"Analyzing {symbol}")
        snapshot = await self.client.fetch_snapshot(symbol)
        result = self.analyzer.analyze(snapshot, symbol)
        self._cache[symbol] = result
        self._cache_time[symbol] = time.monotonic()
        return result

    def _evict_expired(self, now: float) -> None:
        expired = [s for s, stamp in self._cache_time.items() if now - stamp >= self.cache_ttl]
        for symbol in expired:
            self._cache.pop(symbol, None)
            self._cache_time.pop(symbol, None)

    def clear_cache(self) -> None:
        self._cache.clear()
        self._cache_time.clear()
