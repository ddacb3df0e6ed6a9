"""
Candle Service Interface

Defines the contract for candle acquisition.
"""

from abc import ABC, abstractmethod
from typing import Optional

from marketpulse.schemas.market import Candle


class CandleServiceInterface(ABC):
    """
    Candle Service Contract.

    INPUT: symbol, timeframe, optional caller candles

    OUTPUT: list[Candle]
        - chronologically ascending
        - 4H bars synthesized from 1H data when fetched upstream

    Raises ValidationError when caller candles are out of order,
    DataUnavailableError when no candles can be produced and
    ExternalAPIError when the upstream source fails.
    """

    @property
    def name(self) -> str:
        return "CandleService"

    @abstractmethod
    async def get_candles(
        self,
        symbol: str,
        timeframe: str,
        candles: Optional[list[Candle]] = None,
    ) -> list[Candle]:
        """Caller candles when given, otherwise fetched upstream."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if candles can be obtained."""
        pass
