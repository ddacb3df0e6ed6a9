"""
Candle Ingestion Service

CONTRACT:
    Input:  symbol, timeframe, optional candles
    Output: list[Candle]

RESPONSIBILITIES:
    - Pass caller-supplied candles through
    - Fetch candles from Yahoo Finance when none are supplied
    - Rebuild 4H bars from 1H data (resampler)

The analysis engine never performs I/O; this layer does.
"""

from marketpulse.services.data_ingestion.interface import CandleServiceInterface
from marketpulse.services.data_ingestion.resampler import (
    reconstruct_4h_from_1h,
    resample_candles,
)
from marketpulse.services.data_ingestion.service import (
    CandleService,
    get_candle_service,
)

__all__ = [
    "CandleServiceInterface",
    "CandleService",
    "get_candle_service",
    "reconstruct_4h_from_1h",
    "resample_candles",
]
