"""Pydantic schemas for the swing trade engine."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Enums ---

class Verdict(str, Enum):
    STRONG_BUY = "STRONG BUY"
    BUY = "BUY"
    HOLD = "HOLD"
    SELL = "SELL"
    STRONG_SELL = "STRONG SELL"


class ErrorKind(str, Enum):
    MISSING_ESSENTIAL_DATA = "missing_essential_data"
    ANALYSIS_FAILED = "analysis_failed"


# --- Input ---

class InstrumentSnapshot(BaseModel):
    """Raw provider payloads for one symbol, one slot per data source.

    Every slot is optional; only ``daily`` is required for an analysis to run.
    Any other slot that is not an object is treated as absent.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    daily: Optional[dict[str, Any]] = None
    rsi: Optional[dict[str, Any]] = None
    macd: Optional[dict[str, Any]] = None
    obv: Optional[dict[str, Any]] = None
    adx: Optional[dict[str, Any]] = None
    bbands: Optional[dict[str, Any]] = None
    overview: Optional[dict[str, Any]] = None
    earnings: Optional[dict[str, Any]] = None
    news: Optional[dict[str, Any]] = None
    sector: Optional[dict[str, Any]] = None
    global_quote: Optional[dict[str, Any]] = Field(None, alias="globalQuote")
    sp_global_quote: Optional[dict[str, Any]] = Field(None, alias="spGlobalQuote")
    sp_sma: Optional[dict[str, Any]] = Field(None, alias="spSMA")
    options: Optional[dict[str, Any]] = None

    @field_validator(
        "rsi", "macd", "obv", "adx", "bbands", "overview", "earnings", "news",
        "sector", "global_quote", "sp_global_quote", "sp_sma", "options",
        mode="before",
    )
    @classmethod
    def _drop_non_mapping(cls, value: Any) -> Any:
        return value if isinstance(value, Mapping) else None

    def populated_slots(self) -> list[str]:
        return [name for name, value in self if value]


# --- Output ---

class AnalysisError(BaseModel):
    """Structured failure; serialises to ``{"error": ...}`` only."""

    model_config = ConfigDict(frozen=True)

    error: str
    kind: ErrorKind = Field(ErrorKind.ANALYSIS_FAILED, exclude=True)


class AnalysisReport(BaseModel):
    """Score, verdict, targets and every signal that fed the score."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    score: int = Field(ge=0, le=100)
    verdict: Verdict
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
    entry: float = 0.0
    exit: float = 0.0
    potential: Optional[float] = None
    contributions: dict[str, int] = Field(default_factory=dict)

    @property
    def is_buy(self) -> bool:
        return "BUY" in self.verdict.value

    def display(self) -> dict:
        """Rounded, presentation-ready view of the report."""
        return {
            "score": self.score,
            "verdict": self.verdict.value,
            "rsi": f"{self.rsi:.1f}",
            "macdBull": self.macd_bull,
            "adx": f"{self.adx:.1f}",
            "pattern": self.pattern,
            "volSurge": self.vol_surge,
            "obvBull": self.obv_bull,
            "aboveMA": self.above_ma,
            "earningsQoQ": f"{self.earnings_qoq * 100:.1f}",
            "avgSentiment": f"{self.avg_sentiment:.2f}",
            "marketUp": self.market_up,
            "sectorRank": self.sector_rank,
            "oiChange": self.oi_change,
            "entry": f"{self.entry:.2f}",
            "exit": f"{self.exit:.2f}",
            "potential": "N/A" if self.potential is None else f"{self.potential:.1f}",
            "price": f"{self.price:.2f}",
        }


AnalysisResult = AnalysisReport | AnalysisError
