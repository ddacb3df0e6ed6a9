"""
CONTRACT 2: Indicator Engine

Input: list[Candle]
Output: IndicatorSet

Every series is index-aligned with the candle list it was computed from.
Positions without enough history hold NaN; NaN is never read as zero.
Pure Python/NumPy - deterministic.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np


def to_optional_list(values: np.ndarray) -> list[Optional[float]]:
    """NaN-aware conversion of a numpy series to JSON-friendly floats."""
    return [None if not math.isfinite(v) else float(v) for v in values.tolist()]


@dataclass(frozen=True)
class BollingerSeries:
    """Bollinger band series."""

    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


@dataclass(frozen=True)
class IndicatorSet:
    """
    Indicator series for one candle list.
    Returned by: calculate_indicators
    Consumed by: Analysis Service (scoring, levels, scenarios)
    """

    rsi: np.ndarray
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray
    ema20: np.ndarray
    ema50: np.ndarray
    ema200: np.ndarray
    adx: np.ndarray
    bollinger: BollingerSeries
    ema200_slope: Optional[float] = None

    def __len__(self) -> int:
        return len(self.rsi)

    def to_dict(self) -> dict:
        return {
            "rsi": to_optional_list(self.rsi),
            "macd": to_optional_list(self.macd),
            "signal": to_optional_list(self.signal),
            "histogram": to_optional_list(self.histogram),
            "ema20": to_optional_list(self.ema20),
            "ema50": to_optional_list(self.ema50),
            "ema200": to_optional_list(self.ema200),
            "adx": to_optional_list(self.adx),
            "bollinger": {
                "upper": to_optional_list(self.bollinger.upper),
                "middle": to_optional_list(self.bollinger.middle),
                "lower": to_optional_list(self.bollinger.lower),
            },
            "ema200_slope": self.ema200_slope,
        }


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Last-bar indicator values; None where the series is undefined."""

    close: Optional[float]
    rsi: Optional[float]
    macd: Optional[float]
    signal: Optional[float]
    ema20: Optional[float]
    ema50: Optional[float]
    ema200: Optional[float]
    adx: Optional[float]
    ema200_slope: Optional[float]

    @property
    def is_complete(self) -> bool:
        """True when the close and the momentum inputs are all defined."""
        return None not in (self.close, self.rsi, self.macd, self.signal)
