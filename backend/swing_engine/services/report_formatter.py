"""Plain-text rendering of an analysis result."""

from __future__ import annotations

from swing_engine.models.schemas import AnalysisError, AnalysisResult

DISCLAIMER = "NOT financial advice. Data-driven only. Markets are risky."


def _check(flag: bool) -> str:
    return "✓" if flag else "✗"


def format_report(symbol: str, result: AnalysisResult) -> str:
    """Render *result* as the sectioned swing-trade summary."""
    if isinstance(result, AnalysisError):
        return f"Error during analysis: {result.error}\n\n{DISCLAIMER}"

    d = result.display()
    lines = [
        f"{symbol.upper()} – Score: {d['score']}/100 → {d['verdict']}",
        f"Price: ${d['price']}",
        "",
        "Technicals (35 pts)",
        f"RSI: {d['rsi']} | MACD bullish: {_check(result.macd_bull)} | "
        f"ADX: {d['adx']} | Pattern: {d['pattern']}",
        "",
        "Volume & Price Action (20 pts)",
        f"Volume surge: {_check(result.vol_surge)} | OBV bullish: {_check(result.obv_bull)}",
        "",
        "Trend & Market (25 pts)",
        f"Above MAs: {_check(result.above_ma)} | S&P uptrend: {_check(result.market_up)} | "
        f"Sector: {d['sectorRank']}",
        "",
        "Fundamentals & Sentiment (20 pts)",
        f"Earnings QoQ: {d['earningsQoQ']}% | Sentiment: {d['avgSentiment']}",
        "",
        "Open Interest",
        f"Total calls OI: {result.oi_change:,}",
    ]

    if result.is_buy:
        lines += [
            "",
            "Swing Setup",
            f"Entry ≈ ${d['entry']}",
            f"Target ≈ ${d['exit']} (+35%)",
            f"Analyst upside: {d['potential']}%",
        ]

    lines += ["", DISCLAIMER]
    return "\n".join(lines)
