"""
Analysis Service Interface

Defines the contract for the market assessment layer.
"""

from abc import abstractmethod

from marketpulse.services.base import BaseService
from marketpulse.schemas.market import AnalysisRequest
from marketpulse.schemas.analysis import AnalysisResult


class AnalysisServiceInterface(BaseService[AnalysisRequest, AnalysisResult]):
    """
    Analysis Service Contract.

    INPUT: AnalysisRequest
        - symbol: Instrument symbol
        - timeframe: 5M / 15M / 1H / 4H / 1D / 1W
        - candles: Optional candle list (fetched upstream when absent)

    OUTPUT: AnalysisResult
        - trend labels, sentiment, bull/bear/neutral percentages
        - support/resistance levels
        - at most one bullish or bearish scenario
        - volatility, risk level and bilingual narrative

    Insufficient history never fails: it yields a neutral 0/0/100 result.
    """

    @property
    def name(self) -> str:
        return "AnalysisService"

    @abstractmethod
    async def execute(self, input_data: AnalysisRequest) -> AnalysisResult:
        """Produce the market assessment for the request."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the service can process requests."""
        pass
