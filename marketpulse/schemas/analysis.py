"""
CONTRACT 3: Market Assessment

Input: IndicatorSet + candles + symbol/timeframe
Output: AnalysisResult

Rule-based scoring, levels and scenarios. Every narrative field is a
BilingualText (Spanish first, English second), both always populated.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class TrendDirection(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"


class TrendStrength(str, Enum):
    STRONG = "STRONG"
    MODERATE = "MODERATE"
    WEAK = "WEAK"


class Sentiment(str, Enum):
    BULLISH_DOMINANCE = "Bullish dominance"
    BEARISH_DOMINANCE = "Bearish dominance"
    MIXED = "Mixed"


class VolatilityLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    UNKNOWN = "UNKNOWN"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    UNKNOWN = "UNKNOWN"


class ScenarioDirection(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"


class ScenarioStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVATED = "ACTIVATED"


# =============================================================================
# BUILDING BLOCKS
# =============================================================================


class BilingualText(BaseModel):
    """Spanish / English text pair."""

    es: str = Field(..., min_length=1)
    en: str = Field(..., min_length=1)

    class Config:
        frozen = True


class TimeframeProfile(BaseModel):
    """Rule thresholds for one timeframe."""

    timeframe: str
    rsi_bull: float
    rsi_bear: float
    macd_neutral: float = Field(..., ge=0)
    adx_trend: float = Field(..., ge=0)
    display_window: int = Field(..., ge=1, description="Bars kept for levels and activation")
    invalidation_multiplier: float = Field(..., gt=0, description="ATR multiple behind the trigger")

    class Config:
        frozen = True


class Scenario(BaseModel):
    """
    Conditional trade scenario.
    Prices are rounded to the symbol's display precision (`decimals`).
    """

    direction: ScenarioDirection
    trigger: float
    target1: float
    target2: float
    invalidation: float
    decimals: int = Field(..., ge=0)
    status: ScenarioStatus
    activation_text: BilingualText
    invalidation_text: BilingualText

    class Config:
        frozen = True

    def format_price(self, value: float) -> str:
        return f"{value:.{self.decimals}f}"


class SupportLevels(BaseModel):
    s1: float
    s2: float
    s3: float


class ResistanceLevels(BaseModel):
    r1: float
    r2: float
    r3: float


# =============================================================================
# OUTPUT: AnalysisResult
# =============================================================================


class AnalysisResult(BaseModel):
    """
    Complete market assessment for one symbol/timeframe.
    Returned by: Analysis Service
    Consumed by: API / frontends

    Percentages are integers that always sum to 100. At most one of
    bullish_scenario / bearish_scenario is set.
    """

    symbol: str
    timeframe: str

    trend_long: TrendDirection
    trend_short: TrendDirection
    trend_strength: TrendStrength
    sentiment: Sentiment

    bull_pct: int = Field(..., ge=0, le=100)
    bear_pct: int = Field(..., ge=0, le=100)
    neutral_pct: int = Field(..., ge=0, le=100)

    opinion: BilingualText
    bullish_scenario: Optional[Scenario] = None
    bearish_scenario: Optional[Scenario] = None
    active_scenario: str = Field(default="none", description="bullish / bearish / none")

    key_support: Optional[float] = None
    key_resistance: Optional[float] = None
    supports: Optional[SupportLevels] = None
    resistances: Optional[ResistanceLevels] = None

    price: Optional[float] = None
    volatility_pct: float = Field(default=0.0, ge=0)
    volatility_level: VolatilityLevel
    risk_level: RiskLevel
    risk_explanation: BilingualText

    scenario_summary: BilingualText
    analysis_text: BilingualText

    generated_at: datetime

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTC-USD",
                "timeframe": "1H",
                "trend_long": "BULLISH",
                "trend_short": "BULLISH",
                "trend_strength": "MODERATE",
                "sentiment": "Bullish dominance",
                "bull_pct": 89,
                "bear_pct": 0,
                "neutral_pct": 11,
                "active_scenario": "none",
                "key_support": 65210.4,
                "key_resistance": 67980.0,
                "price": 67790.2,
                "volatility_pct": 0.41,
                "volatility_level": "LOW",
                "risk_level": "LOW",
                "generated_at": "2024-06-01T00:00:00+00:00",
            }
        }
