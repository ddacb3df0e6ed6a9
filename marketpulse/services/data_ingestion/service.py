"""
Candle Service Implementation

Caller-supplied candles take priority. Otherwise candles come from Yahoo
Finance; Yahoo has no 4H interval, so 4H bars are rebuilt from 1H data.
"""

import logging
from typing import Optional

from marketpulse.core.config import settings
from marketpulse.schemas.market import Candle, Timeframe
from marketpulse.services.base import (
    DataUnavailableError,
    ExternalAPIError,
    ValidationError,
)
from marketpulse.services.data_ingestion.interface import CandleServiceInterface
from marketpulse.services.data_ingestion.resampler import reconstruct_4h_from_1h
from marketpulse.services.data_ingestion.yahoo_adapter import fetch_yahoo_candles

logger = logging.getLogger(__name__)


class CandleService(CandleServiceInterface):
    """
    Candle Service.

    Uses caller candles when present, Yahoo Finance otherwise.
    """

    def __init__(self, enable_live_data: Optional[bool] = None):
        self._enable_live_data = (
            settings.enable_live_data if enable_live_data is None else enable_live_data
        )

    @property
    def name(self) -> str:
        return "CandleService"

    def _check_order(self, symbol: str, candles: list[Candle]) -> None:
        """Caller candles must be chronologically ascending."""
        for prev, current in zip(candles, candles[1:]):
            if current.time < prev.time:
                raise ValidationError(
                    self.name,
                    f"Candles for {symbol} are not in chronological order",
                    {"symbol": symbol, "time": current.time, "previous_time": prev.time},
                )

    async def get_candles(
        self,
        symbol: str,
        timeframe: str,
        candles: Optional[list[Candle]] = None,
    ) -> list[Candle]:
        if candles:
            self._check_order(symbol, candles)
            return list(candles)

        if not self._enable_live_data:
            raise DataUnavailableError(
                self.name,
                f"No candles supplied for {symbol} and live data is disabled",
                {"symbol": symbol, "timeframe": timeframe},
            )

        tf = timeframe.upper()
        try:
            if tf == Timeframe.H4.value:
                hourly = await fetch_yahoo_candles(symbol, Timeframe.H1.value)
                fetched = reconstruct_4h_from_1h(hourly)
                logger.debug(f"Rebuilt {len(fetched)} 4H candles from {len(hourly)} 1H candles")
            else:
                fetched = await fetch_yahoo_candles(symbol, tf)
        except Exception as e:
            logger.error(f"Error fetching {symbol} {tf} from Yahoo Finance: {e}")
            raise ExternalAPIError(
                self.name,
                f"Yahoo fetch failed for {symbol}",
                {"symbol": symbol, "timeframe": tf, "error": str(e)},
            ) from e

        if not fetched:
            raise DataUnavailableError(
                self.name,
                f"No candle data for {symbol} ({tf})",
                {"symbol": symbol, "timeframe": tf},
            )

        return fetched

    async def health_check(self) -> bool:
        """Caller candles always work; upstream availability is checked per request."""
        return True


# Singleton instance
_service_instance: Optional[CandleService] = None


def get_candle_service() -> CandleService:
    """Get or create candle service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = CandleService()
    return _service_instance
