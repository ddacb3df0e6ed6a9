"""
Indicator Engine Service Implementation

Builds the IndicatorSet for a candle list.
Pure Python/NumPy calculations - no I/O, no shared state.
"""

import logging
from typing import Sequence

import numpy as np

from marketpulse.schemas.market import Candle
from marketpulse.schemas.indicators import (
    BollingerSeries,
    IndicatorSet,
    IndicatorSnapshot,
)
from marketpulse.services.indicators.calculations import (
    adx,
    as_series,
    bollinger_bands,
    ema,
    last_value,
    macd,
    rsi,
    slope,
)

logger = logging.getLogger(__name__)


def candles_to_arrays(candles: Sequence[Candle]) -> tuple:
    """Convert a candle list to (highs, lows, closes) float arrays, NaN for missing prices."""
    highs = as_series([c.high for c in candles])
    lows = as_series([c.low for c in candles])
    closes = as_series([c.close for c in candles])
    return highs, lows, closes


def calculate_indicators(candles: Sequence[Candle]) -> IndicatorSet:
    """
    Calculate every series the assessment needs.

    Always returns series aligned with `candles`; an empty list yields
    empty series and no slope.
    """
    highs, lows, closes = candles_to_arrays(candles)

    ema20 = ema(closes, 20)
    ema50 = ema(closes, 50)
    ema200 = ema(closes, 200)

    macd_line, signal_line, histogram = macd(closes)
    upper, middle, lower = bollinger_bands(closes)

    indicators = IndicatorSet(
        rsi=rsi(closes, 14),
        macd=macd_line,
        signal=signal_line,
        histogram=histogram,
        ema20=ema20,
        ema50=ema50,
        ema200=ema200,
        adx=adx(highs, lows, closes, 14),
        bollinger=BollingerSeries(upper=upper, middle=middle, lower=lower),
        ema200_slope=slope(ema200, 5),
    )

    logger.debug(
        f"Indicators over {len(candles)} candles "
        f"(defined rsi={int(np.count_nonzero(~np.isnan(indicators.rsi)))}, "
        f"ema200={int(np.count_nonzero(~np.isnan(ema200)))})"
    )
    return indicators


def snapshot_last(candles: Sequence[Candle], indicators: IndicatorSet) -> IndicatorSnapshot:
    """Last-bar values of the candle list and its indicators."""
    _, _, closes = candles_to_arrays(candles[-1:])
    return IndicatorSnapshot(
        close=last_value(closes),
        rsi=last_value(indicators.rsi),
        macd=last_value(indicators.macd),
        signal=last_value(indicators.signal),
        ema20=last_value(indicators.ema20),
        ema50=last_value(indicators.ema50),
        ema200=last_value(indicators.ema200),
        adx=last_value(indicators.adx),
        ema200_slope=indicators.ema200_slope,
    )
