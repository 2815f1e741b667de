"""Alpha Vantage client - fetches every payload an analysis needs.

One snapshot is fourteen requests issued concurrently. Provider-side
failures (rate-limit notes, unknown symbols) come back as HTTP 200 with a
message payload; those are logged and passed through so the engine can
degrade on the missing series.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from swing_engine.config.settings import settings
from swing_engine.models.schemas import InstrumentSnapshot

logger = logging.getLogger(__name__)

_PROVIDER_MESSAGE_KEYS = ("Note", "Information", "Error Message")


class MarketDataError(Exception):
    """Base class for market data retrieval failures."""


class MissingApiKeyError(MarketDataError):
    pass


class DataFetchError(MarketDataError):
    pass


class AlphaVantageClient:
    """Async client for the Alpha Vantage query endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        benchmark_symbol: str | None = None,
        news_limit: int | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = settings.alpha_vantage_api_key if api_key is None else api_key
        self.base_url = base_url or settings.alpha_vantage_base_url
        self.timeout = timeout or settings.request_timeout
        self.benchmark_symbol = benchmark_symbol or settings.benchmark_symbol
        self.news_limit = news_limit or settings.news_limit
        self._client = client

    def snapshot_requests(self, symbol: str) -> dict[str, dict[str, Any]]:
        """Query parameters per snapshot slot."""
        benchmark = self.benchmark_symbol
        return {
            "daily": {"function": "TIME_SERIES_DAILY_ADJUSTED", "symbol": symbol, "outputsize": "compact"},
            "rsi": {"function": "RSI", "symbol": symbol, "interval": "daily", "time_period": 14, "series_type": "close"},
            "macd": {"function": "MACD", "symbol": symbol, "interval": "daily", "series_type": "close"},
            "obv": {"function": "OBV", "symbol": symbol, "interval": "daily"},
            "adx": {"function": "ADX", "symbol": symbol, "interval": "daily", "time_period": 14},
            "bbands": {"function": "BBANDS", "symbol": symbol, "interval": "daily", "time_period": 20, "series_type": "close"},
            "overview": {"function": "OVERVIEW", "symbol": symbol},
            "earnings": {"function": "EARNINGS", "symbol": symbol},
            "news": {"function": "NEWS_SENTIMENT", "tickers": symbol, "limit": self.news_limit},
            "sector": {"function": "SECTOR"},
            "global_quote": {"function": "GLOBAL_QUOTE", "symbol": symbol},
            "sp_global_quote": {"function": "GLOBAL_QUOTE", "symbol": benchmark},
            "sp_sma": {"function": "SMA", "symbol": benchmark, "interval": "daily", "time_period": 200, "series_type": "close"},
            "options": {"function": "HISTORICAL_OPTIONS", "symbol": symbol, "date": "latest"},
        }

    async def fetch_snapshot(self, symbol: str) -> InstrumentSnapshot:
        """Fetch all payloads for *symbol* into one snapshot."""
        if not self.api_key:
            raise MissingApiKeyError("API key required")

        requests = self.snapshot_requests(symbol)
        try:
            if self._client is not None:
                payloads = await self._gather(self._client, requests)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    payloads = await self._gather(client, requests)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"API fetch error for {symbol}: {e}")
            raise DataFetchError(f"Failed to fetch data: {e}.") from e

        for slot, payload in payloads.items():
            self._log_provider_message(symbol, slot, payload)
        return InstrumentSnapshot(**payloads)

    async def _gather(self, client: httpx.AsyncClient, requests: dict[str, dict]) -> dict[str, Any]:
        results = await asyncio.gather(
            *(self._get(client, params) for params in requests.values())
        )
        return {
            slot: payload if isinstance(payload, dict) else None
            for slot, payload in zip(requests, results)
        }

    async def _get(self, client: httpx.AsyncClient, params: dict[str, Any]) -> Any:
        resp = await client.get(
            self.base_url,
            params={**params, "apikey": self.api_key},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _log_provider_message(symbol: str, slot: str, payload: Any) -> None:
        if not isinstance(payload, dict):
            return
        for key in _PROVIDER_MESSAGE_KEYS:
            if key in payload:
                logger.warning(f"Alpha Vantage {slot} for {symbol}: {payload[key]}")
                return
