"""Composite scoring engine for swing trade setups.

Each condition below adds its points independently when it holds; the
weights sum to 100, so the score is bounded to [0, 100]. The verdict is a
step function of the score and the price band is a fixed pullback entry with
a +35% exit.

Points by group:
- Technicals (35): RSI oversold, MACD bullish crossover, ADX trend strength
- Volume & price action (20): lower Bollinger band touch, volume surge with OBV
- Trend & market (25): moving-average stack, market uptrend with a top sector
- Fundamentals & sentiment (20): earnings growth, positive news sentiment
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from swing_engine.analysis.signals import SignalSet
from swing_engine.models.schemas import Verdict

ENTRY_DISCOUNT = 0.94
EXIT_MULTIPLIER = 1.35


@dataclass(frozen=True)
class Condition:
    name: str
    points: int
    test: Callable[[SignalSet], bool]


@dataclass(frozen=True)
class ScoreCard:
    score: int
    verdict: Verdict
    entry: float
    exit: float
    potential: float | None
    contributions: dict[str, int] = field(default_factory=dict)


class ScoringModel:
    """Scores a ``SignalSet`` and maps it to a verdict and price targets."""

    CONDITIONS: tuple[Condition, ...] = (
        Condition("rsi_oversold", 12, lambda s: s.rsi < 35),
        Condition("macd_crossover", 15, lambda s: s.macd_bull),
        Condition("adx_trending", 10, lambda s: s.adx > 25),
        Condition("lower_band_touch", 8, lambda s: s.on_lower_band),
        Condition("volume_confirmation", 12, lambda s: s.vol_surge and s.obv_bull),
        Condition("ma_alignment", 10, lambda s: s.above_ma),
        Condition("earnings_growth", 10, lambda s: s.earnings_qoq > 0.25),
        Condition("positive_sentiment", 8, lambda s: s.avg_sentiment >= 0.5),
        Condition("market_tailwind", 15, lambda s: s.market_up and "Top" in s.sector_rank),
    )

    # Highest first; a score equal to a threshold takes that tier.
    VERDICT_THRESHOLDS: tuple[tuple[int, Verdict], ...] = (
        (85, Verdict.STRONG_BUY),
        (70, Verdict.BUY),
        (50, Verdict.HOLD),
        (30, Verdict.SELL),
    )

    def score(self, signals: SignalSet) -> ScoreCard:
        contributions = {
            c.name: c.points for c in self.CONDITIONS if c.test(signals)
        }
        total = sum(contributions.values())
        entry, exit_price = self.price_band(signals.price)

        return ScoreCard(
            score=total,
            verdict=self.verdict(total),
            entry=entry,
            exit=exit_price,
            potential=self.potential(signals.analyst_target, entry),
            contributions=contributions,
        )

    @classmethod
    def max_score(cls) -> int:
        return sum(c.points for c in cls.CONDITIONS)

    @classmethod
    def verdict(cls, score: int) -> Verdict:
        for threshold, verdict in cls.VERDICT_THRESHOLDS:
            if score >= threshold:
                return verdict
        return Verdict.STRONG_SELL

    @staticmethod
    def price_band(price: float) -> tuple[float, float]:
        """Entry (6% pullback) and exit (+35%) around *price*."""
        return price * ENTRY_DISCOUNT, price * EXIT_MULTIPLIER

    @staticmethod
    def potential(analyst_target: float, entry: float) -> float | None:
        """Upside from *entry* to the analyst target, in percent."""
        if not entry:
            return None
        return round((analyst_target - entry) / entry * 100, 1)
