"""
Scenario Builder

Decides which directional scenario (if any) is eligible, whether price
has already activated it, and writes its bilingual texts.

The gating conditions cannot both hold: bullish needs a BULLISH short
trend and bearish a BEARISH one.
"""

import math
from typing import Optional, Sequence

from marketpulse.schemas.analysis import (
    BilingualText,
    Scenario,
    ScenarioDirection,
    ScenarioStatus,
    TrendDirection,
)
from marketpulse.schemas.indicators import IndicatorSnapshot
from marketpulse.schemas.market import Candle
from marketpulse.services.analysis.levels import LevelSet
from marketpulse.services.analysis.scoring import MarketScore


ACTIVATION_LOOKBACK = 5
BULLISH_RSI_FLOOR = 48
BEARISH_RSI_CEILING = 52


def allows_bullish(snapshot: IndicatorSnapshot, score: MarketScore) -> bool:
    return (
        score.trend_short == TrendDirection.BULLISH
        and snapshot.macd >= snapshot.signal
        and snapshot.rsi > BULLISH_RSI_FLOOR
    )


def allows_bearish(snapshot: IndicatorSnapshot, score: MarketScore) -> bool:
    return (
        score.trend_short == TrendDirection.BEARISH
        and snapshot.macd <= snapshot.signal
        and snapshot.rsi < BEARISH_RSI_CEILING
    )


def was_activated(
    candles: Sequence[Candle], trigger: float, direction: ScenarioDirection
) -> bool:
    """True if any of the last ACTIVATION_LOOKBACK closes is beyond the trigger."""
    closes = [
        c.close
        for c in candles[-ACTIVATION_LOOKBACK:]
        if c.close is not None and math.isfinite(c.close)
    ]
    if direction == ScenarioDirection.BULLISH:
        return any(close > trigger for close in closes)
    return any(close < trigger for close in closes)


def _activation_text(
    direction: ScenarioDirection, activated: bool, trigger: str
) -> BilingualText:
    bullish = direction == ScenarioDirection.BULLISH
    side_es = "por encima de" if bullish else "por debajo de"
    side_en = "above" if bullish else "below"

    if activated:
        return BilingualText(
            es=f"Escenario activado por cierre previo {side_es} {trigger}.",
            en=f"Scenario activated by a previous close {side_en} {trigger}.",
        )

    name_es = "alcista" if bullish else "bajista"
    return BilingualText(
        es=f"El escenario {name_es} se activaría si la vela cierra {side_es} {trigger}.",
        en=f"The {direction.value} scenario would activate if the candle closes {side_en} {trigger}.",
    )


def _invalidation_text(
    direction: ScenarioDirection, timeframe: str, invalidation: str
) -> BilingualText:
    bullish = direction == ScenarioDirection.BULLISH
    side_es = "por debajo de" if bullish else "por encima de"
    side_en = "below" if bullish else "above"
    return BilingualText(
        es=(
            f"Una vez activado, el escenario quedaría invalidado si una vela de "
            f"{timeframe} cierra {side_es} {invalidation}."
        ),
        en=(
            f"Once activated, the scenario would be invalidated if a {timeframe} "
            f"candle closes {side_en} {invalidation}."
        ),
    )


def build_scenario(
    direction: ScenarioDirection,
    levels: LevelSet,
    candles: Sequence[Candle],
    timeframe: str,
    decimals: int,
) -> Scenario:
    """Scenario for one direction; prices rounded to `decimals`."""
    if direction == ScenarioDirection.BULLISH:
        trigger = levels.bullish_trigger
        targets = levels.bullish_targets
        invalidation = levels.bullish_invalidation
    else:
        trigger = levels.bearish_trigger
        targets = levels.bearish_targets
        invalidation = levels.bearish_invalidation

    activated = was_activated(candles, trigger, direction)

    def fmt(value: float) -> str:
        return f"{value:.{decimals}f}"

    return Scenario(
        direction=direction,
        trigger=round(trigger, decimals),
        target1=round(targets[0], decimals),
        target2=round(targets[1], decimals),
        invalidation=round(invalidation, decimals),
        decimals=decimals,
        status=ScenarioStatus.ACTIVATED if activated else ScenarioStatus.PENDING,
        activation_text=_activation_text(direction, activated, fmt(trigger)),
        invalidation_text=_invalidation_text(direction, timeframe, fmt(invalidation)),
    )


def build_scenarios(
    snapshot: IndicatorSnapshot,
    score: MarketScore,
    levels: LevelSet,
    candles: Sequence[Candle],
    timeframe: str,
    decimals: int,
) -> tuple[Optional[Scenario], Optional[Scenario]]:
    """
    (bullish_scenario, bearish_scenario); at most one is set.

    `snapshot` must be complete (RSI, MACD and signal defined).
    """
    bullish = None
    bearish = None

    if allows_bullish(snapshot, score):
        bullish = build_scenario(
            ScenarioDirection.BULLISH, levels, candles, timeframe, decimals
        )

    if allows_bearish(snapshot, score):
        bearish = build_scenario(
            ScenarioDirection.BEARISH, levels, candles, timeframe, decimals
        )

    return bullish, bearish


def active_scenario(
    bullish: Optional[Scenario], bearish: Optional[Scenario]
) -> str:
    """'bullish' / 'bearish' for an ACTIVATED scenario, else 'none'."""
    if bullish is not None and bullish.status == ScenarioStatus.ACTIVATED:
        return ScenarioDirection.BULLISH.value
    if bearish is not None and bearish.status == ScenarioStatus.ACTIVATED:
        return ScenarioDirection.BEARISH.value
    return "none"
