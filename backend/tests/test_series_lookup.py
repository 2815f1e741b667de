"""Tests for latest-value lookup over date-keyed series."""

import pytest

from swing_engine.analysis.series_lookup import SeriesLookup, latest
from swing_engine.models.records import BollingerPoint, MacdPoint, RsiPoint

from conftest import daily_payload, indicator_payload


class TestLatest:
    def test_picks_three_most_recent_by_date(self):
        payload = {"Technical Analysis: RSI": {
            "2024-01-02": {"RSI": "40"},
            "2024-01-05": {"RSI": "55"},
            "2023-12-29": {"RSI": "35"},
            "2024-01-04": {"RSI": "50"},
        }}
        triple = latest(payload, "RSI")
        assert triple.current == {"RSI": "55"}
        assert triple.previous == {"RSI": "50"}
        assert triple.two_ago == {"RSI": "40"}

    def test_daily_table_fallback(self):
        payload = daily_payload([(1, 2, 0.5, 1.5, 10), (1, 2, 0.5, 1.2, 20)])
        triple = latest(payload, "RSI")
        assert triple.current["4. close"] == "1.5000"
        assert triple.previous["4. close"] == "1.2000"
        assert triple.two_ago == {}

    def test_technical_table_takes_precedence(self):
        payload = {
            "Technical Analysis: SMA": {"2024-01-02": {"SMA": "10"}},
            "Time Series (Daily)": {"2024-01-03": {"4. close": "11"}},
        }
        assert latest(payload, "SMA").current == {"SMA": "10"}

    @pytest.mark.parametrize("payload", [None, {}, {"Meta Data": {}}, "rate limited", [1, 2]])
    def test_missing_series_yields_empty_records(self, payload):
        triple = latest(payload, "MACD")
        assert (triple.current, triple.previous, triple.two_ago) == ({}, {}, {})

    def test_non_mapping_table_yields_empty_records(self):
        triple = latest({"Technical Analysis: ADX": ["bad"]}, "ADX")
        assert triple.current == {}

    def test_short_series_pads_with_empty_records(self):
        payload = indicator_payload("RSI", [{"RSI": 61.2}])
        triple = latest(payload, "RSI")
        assert triple.current == {"RSI": "61.2"}
        assert triple.previous == {}
        assert triple.two_ago == {}

    def test_non_iso_keys_are_skipped(self):
        payload = {"Technical Analysis: RSI": {
            "01/05/2024": {"RSI": "99"},
            "2024-01-04": {"RSI": "50"},
        }}
        assert latest(payload, "RSI").current == {"RSI": "50"}


class TestTypedRecords:
    def test_parses_typed_triple(self):
        payload = indicator_payload("MACD", [
            {"MACD": 1.5, "MACD_Signal": 1.0},
            {"MACD": 0.8, "MACD_Signal": 1.0},
        ])
        triple = latest(payload, "MACD", MacdPoint)
        assert triple.current.macd == 1.5
        assert triple.previous.signal == 1.0
        assert triple.two_ago == MacdPoint()

    def test_missing_and_invalid_fields_default_to_zero(self):
        payload = {"Technical Analysis: RSI": {
            "2024-01-05": {"RSI": "None"},
            "2024-01-04": {},
            "2024-01-03": "garbage",
        }}
        triple = latest(payload, "RSI", RsiPoint)
        assert [p.rsi for p in (triple.current, triple.previous, triple.two_ago)] == [0.0, 0.0, 0.0]

    def test_bollinger_accepts_both_spellings(self):
        assert BollingerPoint.parse({"Real Lower Band": "101.5"}).lower_band == 101.5
        assert BollingerPoint.parse({"Lower Band": "99.5"}).lower_band == 99.5

    def test_recent_returns_most_recent_first(self):
        payload = daily_payload([(1, 1, 1, c, 1) for c in (5, 4, 3, 2, 1)])
        rows = SeriesLookup().recent(payload, "DAILY", 3)
        assert [r["4. close"] for r in rows] == ["5.0000", "4.0000", "3.0000"]
