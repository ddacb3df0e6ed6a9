"""
Indicator Engine Service

CONTRACT:
    Input:  list[Candle]
    Output: IndicatorSet

RESPONSIBILITIES:
    - Calculate EMA 20/50/200, RSI, MACD, Bollinger Bands, ADX
    - Calculate ATR for level spacing
    - Keep every series aligned with the input candles

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from marketpulse.services.indicators.service import (
    calculate_indicators,
    candles_to_arrays,
    snapshot_last,
)

__all__ = [
    "calculate_indicators",
    "candles_to_arrays",
    "snapshot_last",
]
