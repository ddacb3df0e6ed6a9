"""
CONTRACT 1: Candle Input

Input: AnalysisRequest (symbol, timeframe, optional candles)
Output: list[Candle] handed to the Indicator Engine

Candles arrive either from the caller (already normalized) or from the
candle provider. Malformed prices are not rejected here: null values are
carried through and treated as undefined by the engine.
"""

from enum import Enum
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    M5 = "5M"
    M15 = "15M"
    H1 = "1H"
    H4 = "4H"
    D1 = "1D"
    W1 = "1W"


# =============================================================================
# CANDLES
# =============================================================================


class Candle(BaseModel):
    """Single OHLCV bar. `time` is epoch milliseconds of the bar open."""

    time: int = Field(..., validation_alias=AliasChoices("time", "timestamp"))
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    close: Optional[float] = None
    volume: float = Field(default=0.0, ge=0)

    class Config:
        frozen = True

    @field_validator("volume", mode="before")
    @classmethod
    def _missing_volume(cls, value):
        return 0.0 if value is None else value


# =============================================================================
# INPUT: AnalysisRequest
# =============================================================================


class AnalysisRequest(BaseModel):
    """
    Request for a market assessment.
    Sent by: API / callers of AnalysisService
    Received by: Analysis Service

    When `candles` is omitted the candle provider fetches them upstream.
    """

    symbol: str = Field(..., min_length=1, description="Instrument symbol, e.g. 'BTC-USD', 'EURUSD=X'")
    timeframe: str = Field(..., min_length=1, description="One of 5M, 15M, 1H, 4H, 1D, 1W")
    candles: Optional[list[Candle]] = Field(
        default=None,
        description="Chronologically ascending candles; fetched upstream when absent",
    )

    @field_validator("symbol", "timeframe")
    @classmethod
    def _normalize_label(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("timeframe")
    @classmethod
    def _upper_timeframe(cls, value: str) -> str:
        return value.upper()

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTC-USD",
                "timeframe": "1H",
                "candles": [
                    {
                        "time": 1717200000000,
                        "open": 67500.0,
                        "high": 67820.5,
                        "low": 67410.0,
                        "close": 67790.2,
                        "volume": 812.4,
                    }
                ],
            }
        }
