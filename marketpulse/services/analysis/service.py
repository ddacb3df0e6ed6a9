"""
Analysis Service Implementation

Candles -> indicators -> scoring -> levels/scenarios -> risk + narrative.

generate_analysis() is the pure engine: synchronous, no I/O, no shared
state. AnalysisService wraps it with candle acquisition for callers that
do not supply candles.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from marketpulse.schemas.analysis import (
    AnalysisResult,
    ResistanceLevels,
    SupportLevels,
)
from marketpulse.schemas.market import AnalysisRequest, Candle
from marketpulse.services.analysis.interface import AnalysisServiceInterface
from marketpulse.services.analysis.levels import compute_levels, display_decimals
from marketpulse.services.analysis.narrative import (
    RISK_EXPLANATIONS,
    analysis_text,
    assess_risk,
    assess_volatility,
    insufficient_data_result,
    opinion_text,
    scenario_summary,
)
from marketpulse.services.analysis.profiles import resolve_profile
from marketpulse.services.analysis.scenarios import active_scenario, build_scenarios
from marketpulse.services.analysis.scoring import score_market
from marketpulse.services.data_ingestion import CandleService, get_candle_service
from marketpulse.services.indicators import calculate_indicators, snapshot_last

logger = logging.getLogger(__name__)


def _as_candles(candles: Optional[Iterable[Union[Candle, dict]]]) -> list[Candle]:
    if not candles:
        return []
    return [c if isinstance(c, Candle) else Candle.model_validate(c) for c in candles]


def generate_analysis(
    symbol: str,
    timeframe: str,
    candles: Optional[Iterable[Union[Candle, dict]]],
) -> AnalysisResult:
    """
    Build the market assessment for one candle series.

    Never raises on data problems: missing history yields the fixed
    insufficient-data result. Identical inputs give identical output apart
    from `generated_at`.
    """
    label = (timeframe or "").strip().upper()
    profile = resolve_profile(label)
    series = _as_candles(candles)

    indicators = calculate_indicators(series)

    # Indicators use the full history; levels and activation use the display window
    window = series[-profile.display_window:]
    snapshot = snapshot_last(window, indicators)

    if not snapshot.is_complete:
        logger.debug(
            f"Insufficient data for {symbol} {label}: {len(series)} candles, "
            f"close={snapshot.close} rsi={snapshot.rsi} macd={snapshot.macd} signal={snapshot.signal}"
        )
        return insufficient_data_result(symbol, label)

    score = score_market(snapshot, profile)
    levels = compute_levels(window, snapshot, score.trend_long, profile, symbol)
    decimals = display_decimals(symbol)

    bullish, bearish = build_scenarios(snapshot, score, levels, window, label, decimals)

    volatility = assess_volatility(window, levels.price)
    risk_level = assess_risk(volatility.level, levels.price, bullish or bearish)

    summary = scenario_summary(bullish, bearish)

    def fmt(value: float) -> str:
        return f"{value:.{decimals}f}"

    return AnalysisResult(
        symbol=symbol,
        timeframe=label,
        trend_long=score.trend_long,
        trend_short=score.trend_short,
        trend_strength=score.trend_strength,
        sentiment=score.sentiment,
        bull_pct=score.bull_pct,
        bear_pct=score.bear_pct,
        neutral_pct=score.neutral_pct,
        opinion=opinion_text(bullish, bearish),
        bullish_scenario=bullish,
        bearish_scenario=bearish,
        active_scenario=active_scenario(bullish, bearish),
        key_support=round(levels.key_support, decimals),
        key_resistance=round(levels.key_resistance, decimals),
        supports=SupportLevels(
            s1=round(levels.supports[0], decimals),
            s2=round(levels.supports[1], decimals),
            s3=round(levels.supports[2], decimals),
        ),
        resistances=ResistanceLevels(
            r1=round(levels.resistances[0], decimals),
            r2=round(levels.resistances[1], decimals),
            r3=round(levels.resistances[2], decimals),
        ),
        price=levels.price,
        volatility_pct=volatility.pct,
        volatility_level=volatility.level,
        risk_level=risk_level,
        risk_explanation=RISK_EXPLANATIONS[risk_level],
        scenario_summary=summary,
        analysis_text=analysis_text(
            symbol,
            label,
            score.trend_long,
            score.trend_short,
            score.trend_strength,
            score.sentiment,
            fmt(levels.key_support),
            fmt(levels.key_resistance),
            summary,
        ),
        generated_at=datetime.now(timezone.utc),
    )


class AnalysisService(AnalysisServiceInterface):
    """
    Analysis Service.

    Uses caller-supplied candles when present, otherwise asks the candle
    service for them, then runs the engine.
    """

    def __init__(self, candle_service: Optional[CandleService] = None):
        self._candle_service = candle_service

    @property
    def candle_service(self) -> CandleService:
        """Lazy initialization of the candle service."""
        if self._candle_service is None:
            self._candle_service = get_candle_service()
        return self._candle_service

    @property
    def name(self) -> str:
        return "AnalysisService"

    async def execute(self, input_data: AnalysisRequest) -> AnalysisResult:
        """Resolve candles for the request and analyze them."""
        candles = await self.candle_service.get_candles(
            input_data.symbol, input_data.timeframe, input_data.candles
        )
        result = generate_analysis(input_data.symbol, input_data.timeframe, candles)
        logger.info(
            f"Analysis {input_data.symbol} {input_data.timeframe}: "
            f"{result.trend_long.value}/{result.trend_short.value} "
            f"bull={result.bull_pct}% bear={result.bear_pct}% active={result.active_scenario}"
        )
        return result

    async def health_check(self) -> bool:
        """The engine is pure computation; healthy whenever the candle service is."""
        return await self.candle_service.health_check()


# Singleton instance
_service_instance: Optional[AnalysisService] = None


def get_analysis_service() -> AnalysisService:
    """Get or create analysis service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AnalysisService()
    return _service_instance
