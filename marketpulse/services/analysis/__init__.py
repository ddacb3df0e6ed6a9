"""
Analysis Service

CONTRACT:
    Input:  AnalysisRequest (symbol, timeframe, candles)
    Output: AnalysisResult

RESPONSIBILITIES:
    - Resolve per-timeframe thresholds
    - Classify trend / sentiment and score bull/bear/neutral
    - Derive support/resistance and scenario levels
    - Gate and activate bullish / bearish scenarios
    - Rate volatility and risk, compose bilingual narrative

PURE PYTHON - Rules are deterministic and auditable.
"""

from marketpulse.services.analysis.interface import AnalysisServiceInterface
from marketpulse.services.analysis.service import (
    AnalysisService,
    generate_analysis,
    get_analysis_service,
)

__all__ = [
    "AnalysisServiceInterface",
    "AnalysisService",
    "generate_analysis",
    "get_analysis_service",
]
