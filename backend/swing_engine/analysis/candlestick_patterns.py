"""Candlestick pattern detection over a short window of daily candles.

Detects single, double, and multi-candle formations. The rule set is a
strategy: ``PatternClassifier`` accepts any ``PatternRuleSet`` so the
vocabulary can change without touching the scoring model.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from itertools import islice

import numpy as np
import pandas as pd

from swing_engine.models.records import Candle, DailyBar

logger = logging.getLogger(__name__)

NO_PATTERN = "None"
PATTERN_ERROR = "Error detecting patterns"
WINDOW = 5


SINGLE_PATTERNS = {
    "hammer": "Hammer",
    "inverted_hammer": "Inverted Hammer",
    "hanging_man": "Hanging Man",
    "shooting_star": "Shooting Star",
    "doji": "Doji",
    "dragonfly_doji": "Dragonfly Doji",
    "gravestone_doji": "Gravestone Doji",
    "marubozu_bull": "Bullish Marubozu",
    "marubozu_bear": "Bearish Marubozu",
    "spinning_top": "Spinning Top",
    "high_wave": "High Wave",
}

DOUBLE_PATTERNS = {
    "bullish_harami": "Bullish Harami",
    "bearish_harami": "Bearish Harami",
    "bullish_engulfing": "Bullish Engulfing",
    "bearish_engulfing": "Bearish Engulfing",
    "high_point_reversal": "High-Point Reversal",
    "low_point_reversal": "Low-Point Reversal",
}

MULTI_PATTERNS = {
    "morning_star": "Morning Star",
    "evening_star": "Evening Star",
    "three_white_soldiers": "Three White Soldiers",
    "three_black_crows": "Three Black Crows",
}

ALL_PATTERNS = {**SINGLE_PATTERNS, **DOUBLE_PATTERNS, **MULTI_PATTERNS}


class PatternRuleSet(ABC):
    """Interface for a candlestick vocabulary."""

    @abstractmethod
    def detect(self, candles: list[Candle]) -> list[str]:
        """Return pattern labels found in *candles* (oldest first)."""
        ...


class CandlestickDetector(PatternRuleSet):
    """Rule-based detector for common reversal and continuation formations.

    Single-candle shapes are read against the trend of up to
    ``trend_lookback`` preceding closes; any window of two or more candles
    is examined.
    """

    def __init__(self, trend_lookback: int = WINDOW):
        self.trend_lookback = trend_lookback

    def detect(self, candles: list[Candle]) -> list[str]:
        df = self._frame(candles)
        found = []
        found.extend(self._detect_single_patterns(df))
        found.extend(self._detect_double_patterns(df))
        found.extend(self._detect_multi_patterns(df))
        return [ALL_PATTERNS[name] for name in found]

    @staticmethod
    def _frame(candles: list[Candle]) -> pd.DataFrame:
        """Build the OHLC frame with body, shadow, and ratio features."""
        df = pd.DataFrame(
            [(c.open, c.high, c.low, c.close) for c in candles],
            columns=["open", "high", "low", "close"],
            dtype=float,
        )
        df["body"] = (df["close"] - df["open"]).abs()
        df["upper_shadow"] = df["high"] - df[["open", "close"]].max(axis=1)
        df["lower_shadow"] = df[["open", "close"]].min(axis=1) - df["low"]
        df["total_range"] = df["high"] - df["low"]
        # A zero range leaves the ratio undefined, so flat candles match nothing.
        df["body_ratio"] = df["body"] / df["total_range"].replace(0, np.nan)
        df["is_bullish"] = df["close"] > df["open"]
        df["is_bearish"] = df["close"] < df["open"]
        df["is_doji"] = df["body_ratio"] < 0.05
        return df

    @staticmethod
    def _long_tail(tail: float, opposite: float, body: float, body_ratio: float) -> bool:
        """Small body with one shadow over twice the body and almost no other shadow."""
        return tail > 2 * body and opposite < 0.3 * body and body_ratio < 0.4

    @staticmethod
    def _doji_kind(row: pd.Series) -> str:
        upper, lower = row["upper_shadow"], row["lower_shadow"]
        if lower > 0 and lower > 3 * upper:
            return "dragonfly_doji"
        if upper > 0 and upper > 3 * lower:
            return "gravestone_doji"
        return "doji"

    def _detect_single_patterns(self, df: pd.DataFrame) -> list[str]:
        patterns = []
        for i in range(1, len(df)):
            row = df.iloc[i]
            body, ratio = row["body"], row["body_ratio"]
            upper, lower = row["upper_shadow"], row["lower_shadow"]
            trend = self._get_trend(df.iloc[max(0, i - self.trend_lookback):i])

            if trend != "neutral":
                reversal = {
                    "down": ("hammer", "inverted_hammer"),
                    "up": ("hanging_man", "shooting_star"),
                }[trend]
                if self._long_tail(lower, upper, body, ratio):
                    patterns.append(reversal[0])
                if self._long_tail(upper, lower, body, ratio):
                    patterns.append(reversal[1])

            if row["total_range"] <= 0:
                continue

            if row["is_doji"]:
                patterns.append(self._doji_kind(row))
            if ratio > 0.9:
                patterns.append("marubozu_bull" if row["is_bullish"] else "marubozu_bear")
            if 0.1 < ratio < 0.3 and min(upper, lower) > body:
                patterns.append("spinning_top")
            if ratio < 0.15 and min(upper, lower) > 2 * body:
                patterns.append("high_wave")

        return patterns

    def _detect_double_patterns(self, df: pd.DataFrame) -> list[str]:
        patterns = []
        for i in range(max(len(df) - 3, 1), len(df)):
            prev, curr = df.iloc[i - 1], df.iloc[i]
            down_up = prev["is_bearish"] and curr["is_bullish"]
            up_down = prev["is_bullish"] and curr["is_bearish"]
            prev_top = max(prev["open"], prev["close"])
            prev_bottom = min(prev["open"], prev["close"])
            curr_top = max(curr["open"], curr["close"])
            curr_bottom = min(curr["open"], curr["close"])

            # Engulfing: the second body covers the first; harami: it sits inside it.
            engulfs = (curr["body"] > prev["body"]
                       and curr_bottom <= prev_bottom and curr_top >= prev_top)
            inside = (curr["body"] < prev["body"]
                      and curr_bottom > prev_bottom and curr_top < prev_top)

            if down_up and engulfs:
                patterns.append("bullish_engulfing")
            if up_down and engulfs:
                patterns.append("bearish_engulfing")
            if down_up and inside:
                patterns.append("bullish_harami")
            if up_down and inside:
                patterns.append("bearish_harami")

            if up_down and self._near(prev["high"], curr["high"]):
                patterns.append("high_point_reversal")
            if down_up and self._near(prev["low"], curr["low"]):
                patterns.append("low_point_reversal")

        return patterns

    @staticmethod
    def _near(first: float, second: float, tolerance: float = 0.005) -> bool:
        return abs(first - second) / max(first, 0.01) < tolerance

    def _detect_multi_patterns(self, df: pd.DataFrame) -> list[str]:
        patterns = []
        for i in range(max(len(df) - 3, 2), len(df)):
            c1, c2, c3 = df.iloc[i - 2], df.iloc[i - 1], df.iloc[i]
            midpoint = (c1["open"] + c1["close"]) / 2
            strong = [c["body_ratio"] > 0.5 for c in (c1, c2, c3)]

            star = strong[0] and c2["body_ratio"] < 0.2 and strong[2]
            if star and c1["is_bearish"] and c3["is_bullish"] and c3["close"] > midpoint:
                patterns.append("morning_star")
            if star and c1["is_bullish"] and c3["is_bearish"] and c3["close"] < midpoint:
                patterns.append("evening_star")

            if all(strong):
                closes = (c1["close"], c2["close"], c3["close"])
                if all(c["is_bullish"] for c in (c1, c2, c3)) and closes[0] < closes[1] < closes[2]:
                    patterns.append("three_white_soldiers")
                if all(c["is_bearish"] for c in (c1, c2, c3)) and closes[0] > closes[1] > closes[2]:
                    patterns.append("three_black_crows")

        return patterns

    @staticmethod
    def _get_trend(rows: pd.DataFrame) -> str:
        if len(rows) < 2:
            return "neutral"
        sma = rows["close"].mean()
        if rows.iloc[-1]["close"] > sma * 1.01:
            return "up"
        elif rows.iloc[-1]["close"] < sma * 0.99:
            return "down"
        return "neutral"


class PatternClassifier:
    """Labels the formations in the most recent daily candles."""

    def __init__(self, rule_set: PatternRuleSet | None = None, window: int = WINDOW):
        self.rule_set = rule_set or CandlestickDetector()
        self.window = window

    def classify(self, daily: Mapping) -> str:
        """Comma-joined labels for the latest *window* candles, or ``"None"``.

        *daily* is the date-keyed daily table in provider order
        (most recent first). Failures degrade to ``"Error detecting patterns"``.
        """
        try:
            rows = islice(daily.values(), self.window)
            candles = [DailyBar.parse(row).to_candle() for row in rows]
            candles.reverse()
            labels = list(dict.fromkeys(self.rule_set.detect(candles)))
        except Exception as e:
            logger.error(f"Pattern detection error: {e}")
            return PATTERN_ERROR
        return ", ".join(labels) if labels else NO_PATTERN
