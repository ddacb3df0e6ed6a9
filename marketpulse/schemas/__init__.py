"""
MarketPulse Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from marketpulse.schemas.market import (
    AnalysisRequest,
    Candle,
    Timeframe,
)
from marketpulse.schemas.indicators import (
    BollingerSeries,
    IndicatorSet,
    IndicatorSnapshot,
)
from marketpulse.schemas.analysis import (
    AnalysisResult,
    BilingualText,
    ResistanceLevels,
    RiskLevel,
    Scenario,
    ScenarioDirection,
    ScenarioStatus,
    Sentiment,
    SupportLevels,
    TimeframeProfile,
    TrendDirection,
    TrendStrength,
    VolatilityLevel,
)

__all__ = [
    # Market
    "AnalysisRequest",
    "Candle",
    "Timeframe",
    # Indicators
    "BollingerSeries",
    "IndicatorSet",
    "IndicatorSnapshot",
    # Analysis
    "AnalysisResult",
    "BilingualText",
    "ResistanceLevels",
    "RiskLevel",
    "Scenario",
    "ScenarioDirection",
    "ScenarioStatus",
    "Sentiment",
    "SupportLevels",
    "TimeframeProfile",
    "TrendDirection",
    "TrendStrength",
    "VolatilityLevel",
]
