"""Shared fixtures: provider-shaped payloads for one instrument."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from swing_engine.models.schemas import InstrumentSnapshot

SYMBOL = "AAPL"


def trading_dates(count: int, start: date = date(2024, 3, 1)) -> list[str]:
    """ISO dates, most recent first."""
    return [(start - timedelta(days=i)).isoformat() for i in range(count)]


def daily_payload(bars: list[tuple[float, float, float, float, float]]) -> dict:
    """Daily series from (open, high, low, close, volume) bars, most recent first."""
    table = {}
    for day, (o, h, lo, c, v) in zip(trading_dates(len(bars)), bars):
        table[day] = {
            "1. open": f"{o:.4f}",
            "2. high": f"{h:.4f}",
            "3. low": f"{lo:.4f}",
            "4. close": f"{c:.4f}",
            "5. adjusted close": f"{c:.4f}",
            "6. volume": str(int(v)),
            "7. dividend amount": "0.0000",
            "8. split coefficient": "1.0",
        }
    return {"Meta Data": {"2. Symbol": SYMBOL}, "Time Series (Daily)": table}


def indicator_payload(name: str, rows: list[dict]) -> dict:
    """Indicator series from field rows, most recent first."""
    table = {
        day: {k: str(v) for k, v in row.items()}
        for day, row in zip(trading_dates(len(rows)), rows)
    }
    return {"Meta Data": {"2: Indicator": name}, f"Technical Analysis: {name}": table}


def quote_payload(price: float) -> dict:
    return {"Global Quote": {"01. symbol": SYMBOL, "05. price": f"{price:.4f}"}}


def news_payload(scores: dict[str, list[float]]) -> dict:
    """One article per (ticker, score); each article mentions only its ticker."""
    feed = []
    for ticker, values in scores.items():
        for value in values:
            feed.append({
                "title": f"{ticker} headline",
                "ticker_sentiment": [
                    {"ticker": ticker, "relevance_score": "0.9", "ticker_sentiment_score": str(value)},
                ],
            })
    return {"items": str(len(feed)), "feed": feed}


def bullish_payloads() -> dict:
    """Every scoring condition holds: score 100."""
    bars = [(100.0, 101.0, 99.0, 100.0, 5_000_000)]
    bars += [(100.0, 101.0, 99.0, 100.0, 1_000_000)] * 19
    return {
        "daily": daily_payload(bars),
        "rsi": indicator_payload("RSI", [{"RSI": 20.0}, {"RSI": 25.0}, {"RSI": 30.0}]),
        "macd": indicator_payload("MACD", [
            {"MACD": 1.5, "MACD_Signal": 1.0, "MACD_Hist": 0.5},
            {"MACD": 0.8, "MACD_Signal": 1.0, "MACD_Hist": -0.2},
        ]),
        "obv": indicator_payload("OBV", [{"OBV": 2000.0}, {"OBV": 1000.0}]),
        "adx": indicator_payload("ADX", [{"ADX": 30.0}]),
        "bbands": indicator_payload("BBANDS", [
            {"Real Upper Band": 120.0, "Real Middle Band": 110.0, "Real Lower Band": 101.0},
        ]),
        "overview": {
            "Symbol": SYMBOL,
            "Sector": "TECHNOLOGY",
            "50DayMovingAverage": "90",
            "200DayMovingAverage": "80",
            "QuarterlyEarningsGrowthYOY": "0.30",
            "ReturnOnEquityTTM": "1.47",
            "AnalystTargetPrice": "150",
        },
        "earnings": {"symbol": SYMBOL, "quarterlyEarnings": []},
        "news": news_payload({SYMBOL: [0.6, 0.6], "MSFT": [-0.9]}),
        "sector": {"Rank A: Real-Time Performance": {"TECHNOLOGY": "Top 5"}},
        "global_quote": quote_payload(100.0),
        "sp_global_quote": quote_payload(5000.0),
        "sp_sma": indicator_payload("SMA", [{"SMA": 4500.0}]),
        "options": {"options": [{"calls": [{"open_interest": "100"}, {"open_interest": "250"}]}]},
    }


def bearish_payloads() -> dict:
    """No scoring condition holds: score 0."""
    payloads = bullish_payloads()
    bars = [(100.0, 101.0, 99.0, 100.0, 1_000_000)] * 20
    payloads.update({
        "daily": daily_payload(bars),
        "rsi": indicator_payload("RSI", [{"RSI": 50.0}]),
        "macd": indicator_payload("MACD", [
            {"MACD": 0.5, "MACD_Signal": 1.0},
            {"MACD": 0.4, "MACD_Signal": 1.0},
        ]),
        "adx": indicator_payload("ADX", [{"ADX": 10.0}]),
        "bbands": indicator_payload("BBANDS", [{"Real Lower Band": 90.0}]),
        "overview": {
            "Sector": "TECHNOLOGY",
            "50DayMovingAverage": "110",
            "200DayMovingAverage": "120",
            "QuarterlyEarningsGrowthYOY": "0",
            "AnalystTargetPrice": "150",
        },
        "news": news_payload({"MSFT": [0.9]}),
        "sp_global_quote": quote_payload(4000.0),
    })
    return payloads


@pytest.fixture
def bullish_snapshot() -> InstrumentSnapshot:
    return InstrumentSnapshot(**bullish_payloads())


@pytest.fixture
def bearish_snapshot() -> InstrumentSnapshot:
    return InstrumentSnapshot(**bearish_payloads())
