"""Typed field records for the provider's date-keyed series.

Every numeric field defaults to 0.0 when it is absent, non-numeric or
non-finite. A raw record that is not a mapping parses as an all-default
record, so a single bad row never aborts an analysis.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from swing_engine.utils.parsing import to_float, to_optional_float


class _RecordBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _coerce_mapping(cls, data: Any) -> dict:
        if isinstance(data, BaseModel):
            return data.model_dump(by_alias=True)
        if not isinstance(data, Mapping):
            return {}
        return dict(data)

    @classmethod
    def parse(cls, raw: Any):
        return cls.model_validate(raw)


class FieldRecord(_RecordBase):
    """A record whose fields are all numeric."""

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return to_float(value)


# --- Price series ---

@dataclass(frozen=True)
class Candle:
    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0


class DailyBar(FieldRecord):
    """One row of ``Time Series (Daily)`` (adjusted endpoint)."""

    open: float = Field(0.0, alias="1. open")
    high: float = Field(0.0, alias="2. high")
    low: float = Field(0.0, alias="3. low")
    close: float = Field(0.0, alias="4. close")
    adjusted_close: float = Field(0.0, alias="5. adjusted close")
    volume: float = Field(0.0, alias="6. volume")

    def to_candle(self) -> Candle:
        return Candle(open=self.open, high=self.high, low=self.low, close=self.close)


class Quote(FieldRecord):
    """The ``Global Quote`` block of a quote payload."""

    price: float = Field(0.0, alias="05. price")
    volume: float = Field(0.0, alias="06. volume")
    previous_close: float = Field(0.0, alias="08. previous close")


# --- Technical indicators ---

class RsiPoint(FieldRecord):
    rsi: float = Field(0.0, alias="RSI")


class MacdPoint(FieldRecord):
    macd: float = Field(0.0, alias="MACD")
    signal: float = Field(0.0, alias="MACD_Signal")
    histogram: float = Field(0.0, alias="MACD_Hist")


class ObvPoint(FieldRecord):
    obv: float = Field(0.0, alias="OBV")


class AdxPoint(FieldRecord):
    adx: float = Field(0.0, alias="ADX")


class SmaPoint(FieldRecord):
    sma: float = Field(0.0, alias="SMA")


class BollingerPoint(FieldRecord):
    # The provider spells these "Real ... Band"; older payloads drop "Real".
    upper_band: float = Field(
        0.0, validation_alias=AliasChoices("Real Upper Band", "Upper Band", "upper_band"),
    )
    middle_band: float = Field(
        0.0, validation_alias=AliasChoices("Real Middle Band", "Middle Band", "middle_band"),
    )
    lower_band: float = Field(
        0.0, validation_alias=AliasChoices("Real Lower Band", "Lower Band", "lower_band"),
    )


# --- Fundamentals ---

class CompanyOverview(_RecordBase):
    """The subset of the ``OVERVIEW`` payload used for scoring."""

    sector: str = Field("", alias="Sector")
    sma50: float = Field(0.0, alias="50DayMovingAverage")
    sma200: float = Field(0.0, alias="200DayMovingAverage")
    quarterly_earnings_growth_yoy: float = Field(0.0, alias="QuarterlyEarningsGrowthYOY")
    return_on_equity: float = Field(0.0, alias="ReturnOnEquityTTM")
    analyst_target_price: float | None = Field(None, alias="AnalystTargetPrice")

    @field_validator("sector", mode="before")
    @classmethod
    def _coerce_sector(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator(
        "sma50", "sma200", "quarterly_earnings_growth_yoy", "return_on_equity",
        mode="before",
    )
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return to_float(value)

    @field_validator("analyst_target_price", mode="before")
    @classmethod
    def _coerce_target(cls, value: Any) -> float | None:
        return to_optional_float(value)
