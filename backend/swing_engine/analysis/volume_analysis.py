"""Volume analysis module.

Compares the latest session's volume with the trailing average to flag
volume surges that confirm a price move.
"""

from __future__ import annotations

import numpy as np

from swing_engine.models.records import DailyBar

SURGE_MULTIPLIER = 1.5


class VolumeAnalyzer:
    """Analyzes volume over the most recent daily bars."""

    def __init__(self, bars: list[DailyBar], lookback: int = 20):
        """Initialize with daily bars.

        Args:
            bars: Daily bars, most recent first
            lookback: Averaging window in sessions
        """
        self.bars = bars[:lookback]
        self.lookback = lookback

    def analyze(self) -> dict:
        """Run volume analysis."""
        if not self.bars:
            return self._empty_result()

        volume = np.array([bar.volume for bar in self.bars], dtype=float)
        # Fixed divisor: a short history counts its missing sessions as zero volume.
        avg_volume = float(volume.sum() / self.lookback)
        current_volume = float(volume[0])

        return {
            "avg_volume_20d": avg_volume,
            "volume_surge": current_volume > avg_volume * SURGE_MULTIPLIER,
        }

    def _empty_result(self) -> dict:
        return {
            "avg_volume_20d": 0.0,
            "volume_surge": False,
        }
