"""Signal extraction from an instrument snapshot.

Turns the raw provider payloads into the flat set of numbers and flags the
scoring model consumes. Missing payloads and fields degrade to 0, False or
"N/A"; nothing here raises on absent data.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from swing_engine.analysis.candlestick_patterns import PatternClassifier
from swing_engine.analysis.series_lookup import DAILY_KEY, SeriesLookup
from swing_engine.analysis.volume_analysis import VolumeAnalyzer
from swing_engine.models.records import (
    AdxPoint,
    BollingerPoint,
    CompanyOverview,
    DailyBar,
    MacdPoint,
    ObvPoint,
    Quote,
    RsiPoint,
    SmaPoint,
)
from swing_engine.models.schemas import InstrumentSnapshot
from swing_engine.utils.parsing import to_float, to_int

SECTOR_RANK_KEY = "Rank A: Real-Time Performance"
DEFAULT_TARGET_MULTIPLIER = 1.35


@dataclass(frozen=True)
class SignalSet:
    price: float = 0.0
    sp500_price: float = 0.0
    sp200_sma: float = 0.0
    market_up: bool = False
    pattern: str = "None"
    rsi: float = 0.0
    macd_bull: bool = False
    adx: float = 0.0
    on_lower_band: bool = False
    vol_avg20: float = 0.0
    vol_surge: bool = False
    obv_bull: bool = False
    above_ma: bool = False
    earnings_qoq: float = 0.0
    roe: float = 0.0
    avg_sentiment: float = 0.0
    sector_rank: str = "N/A"
    oi_change: int = 0
    analyst_target: float = 0.0


def _quote(payload: Any) -> Quote:
    block = payload.get("Global Quote") if isinstance(payload, Mapping) else None
    return Quote.parse(block)


def average_sentiment(news: Any, symbol: str) -> float:
    """Mean ticker sentiment of the feed articles that mention *symbol*."""
    feed = news.get("feed") if isinstance(news, Mapping) else None
    if not isinstance(feed, list):
        return 0.0

    scores = []
    for article in feed:
        if not isinstance(article, Mapping):
            continue
        for entry in article.get("ticker_sentiment") or []:
            if isinstance(entry, Mapping) and entry.get("ticker") == symbol:
                scores.append(to_float(entry.get("ticker_sentiment_score")))
                break
    return sum(scores) / len(scores) if scores else 0.0


def sector_rank(sector: Any, sector_name: str) -> str:
    """Real-time performance entry for *sector_name*, or ``"N/A"``."""
    table = sector.get(SECTOR_RANK_KEY) if isinstance(sector, Mapping) else None
    if not isinstance(table, Mapping) or not sector_name:
        return "N/A"
    rank = table.get(sector_name)
    return str(rank) if rank else "N/A"


def call_open_interest(options: Any) -> int:
    """Total open interest of the nearest-expiry call chain.

    Accepts ``{"options": [{"calls": [...]}, ...]}`` (first chain is the
    nearest) and the flat ``{"data": [{"type": "call", ...}]}`` layout.
    """
    if not isinstance(options, Mapping):
        return 0

    chains = options.get("options")
    if isinstance(chains, list) and chains:
        first = chains[0] if isinstance(chains[0], Mapping) else {}
        calls = first.get("calls") or []
    else:
        contracts = options.get("data")
        if not isinstance(contracts, list):
            return 0
        calls = [c for c in contracts if isinstance(c, Mapping) and c.get("type") == "call"]
        expirations = [str(c.get("expiration")) for c in calls if c.get("expiration")]
        if expirations:
            nearest = min(expirations)
            calls = [c for c in calls if str(c.get("expiration")) == nearest]

    return sum(to_int(c.get("open_interest")) for c in calls if isinstance(c, Mapping))


class SignalExtractor:
    """Derives every scoring input from a snapshot."""

    def __init__(
        self,
        lookup: SeriesLookup | None = None,
        classifier: PatternClassifier | None = None,
        volume_lookback: int = 20,
    ):
        self.lookup = lookup or SeriesLookup()
        self.classifier = classifier or PatternClassifier()
        self.volume_lookback = volume_lookback

    def extract(self, snapshot: InstrumentSnapshot, symbol: str) -> SignalSet:
        price = _quote(snapshot.global_quote).price
        sp500_price = _quote(snapshot.sp_global_quote).price
        sp200_sma = self.lookup.latest(snapshot.sp_sma, "SMA", SmaPoint).current.sma

        pattern = self.classifier.classify((snapshot.daily or {}).get(DAILY_KEY, {}))

        rsi = self.lookup.latest(snapshot.rsi, "RSI", RsiPoint).current.rsi
        macd = self.lookup.latest(snapshot.macd, "MACD", MacdPoint)
        macd_bull = (macd.current.macd > macd.current.signal
                     and macd.previous.macd <= macd.previous.signal)
        adx = self.lookup.latest(snapshot.adx, "ADX", AdxPoint).current.adx

        bars = self.lookup.recent(snapshot.daily, "TIME_SERIES_DAILY", self.volume_lookback, DailyBar)
        last_close = bars[0].close if bars else 0.0
        bbands = self.lookup.latest(snapshot.bbands, "BBANDS", BollingerPoint)
        on_lower_band = last_close <= bbands.current.lower_band

        volume = VolumeAnalyzer(bars, lookback=self.volume_lookback).analyze()

        obv = self.lookup.latest(snapshot.obv, "OBV", ObvPoint)
        obv_bull = obv.current.obv > obv.previous.obv

        overview = CompanyOverview.parse(snapshot.overview)
        above_ma = price > overview.sma50 > overview.sma200

        analyst_target = overview.analyst_target_price
        if analyst_target is None:
            analyst_target = price * DEFAULT_TARGET_MULTIPLIER

        return SignalSet(
            price=price,
            sp500_price=sp500_price,
            sp200_sma=sp200_sma,
            market_up=sp500_price > sp200_sma,
            pattern=pattern,
            rsi=rsi,
            macd_bull=macd_bull,
            adx=adx,
            on_lower_band=on_lower_band,
            vol_avg20=volume["avg_volume_20d"],
            vol_surge=volume["volume_surge"],
            obv_bull=obv_bull,
            above_ma=above_ma,
            earnings_qoq=overview.quarterly_earnings_growth_yoy,
            roe=overview.return_on_equity,
            avg_sentiment=average_sentiment(snapshot.news, symbol),
            sector_rank=sector_rank(snapshot.sector, overview.sector),
            oi_change=call_open_interest(snapshot.options),
            analyst_target=analyst_target,
        )
