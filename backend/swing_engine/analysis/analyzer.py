"""Analysis entry point: snapshot in, report or error out.

``AnalysisOrchestrator.analyze`` never raises. A snapshot without daily
prices yields the missing-data error; any other fault becomes an
``AnalysisError`` carrying the underlying message.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from swing_engine.analysis.scoring_engine import ScoringModel
from swing_engine.analysis.series_lookup import DAILY_KEY
from swing_engine.analysis.signals import SignalExtractor
from swing_engine.models.schemas import (
    AnalysisError,
    AnalysisReport,
    AnalysisResult,
    ErrorKind,
    InstrumentSnapshot,
)

logger = logging.getLogger(__name__)

MISSING_DATA_MESSAGE = "Missing essential data for analysis"


class AnalysisOrchestrator:
    """Runs signal extraction and scoring for one instrument snapshot."""

    def __init__(
        self,
        extractor: SignalExtractor | None = None,
        model: ScoringModel | None = None,
    ):
        self.extractor = extractor or SignalExtractor()
        self.model = model or ScoringModel()

    def analyze(self, snapshot: InstrumentSnapshot | Mapping | None, symbol: str) -> AnalysisResult:
        symbol = (symbol or "").strip().upper()
        try:
            if snapshot is not None and not isinstance(snapshot, InstrumentSnapshot):
                snapshot = InstrumentSnapshot.model_validate(snapshot)

            if snapshot is None or not self._has_daily(snapshot):
                logger.warning(f"Missing daily data for {symbol}")
                return AnalysisError(
                    error=MISSING_DATA_MESSAGE,
                    kind=ErrorKind.MISSING_ESSENTIAL_DATA,
                )

            signals = self.extractor.extract(snapshot, symbol)
            card = self.model.score(signals)

            return AnalysisReport(
                symbol=symbol,
                score=card.score,
                verdict=card.verdict,
                price=signals.price,
                sp500_price=signals.sp500_price,
                sp200_sma=signals.sp200_sma,
                market_up=signals.market_up,
                pattern=signals.pattern,
                rsi=signals.rsi,
                macd_bull=signals.macd_bull,
                adx=signals.adx,
                on_lower_band=signals.on_lower_band,
                vol_avg20=signals.vol_avg20,
                vol_surge=signals.vol_surge,
                obv_bull=signals.obv_bull,
                above_ma=signals.above_ma,
                earnings_qoq=signals.earnings_qoq,
                roe=signals.roe,
                avg_sentiment=signals.avg_sentiment,
                sector_rank=signals.sector_rank,
                oi_change=signals.oi_change,
                analyst_target=signals.analyst_target,
                entry=card.entry,
                exit=card.exit,
                potential=card.potential,
                contributions=card.contributions,
            )
        except Exception as e:
            slots = snapshot.populated_slots() if isinstance(snapshot, InstrumentSnapshot) else []
            logger.error(f"Analysis error for {symbol}: {e} (data: {slots})")
            return AnalysisError(
                error=f"Analysis failed: {e}. Data may be incomplete.",
                kind=ErrorKind.ANALYSIS_FAILED,
            )

    @staticmethod
    def _has_daily(snapshot: InstrumentSnapshot) -> bool:
        return bool(snapshot.daily and snapshot.daily.get(DAILY_KEY))


def analyze(snapshot: InstrumentSnapshot | Mapping | None, symbol: str) -> AnalysisResult:
    """Analyze *snapshot* with the default rule set and weights."""
    return AnalysisOrchestrator().analyze(snapshot, symbol)
