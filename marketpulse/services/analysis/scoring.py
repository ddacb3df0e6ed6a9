"""
Scoring Engine

Turns last-bar indicator values into trend labels, a sentiment label and
bull/bear/neutral percentages. Deterministic and auditable: every point
comes from one of five fixed contributions.
"""

import math
from dataclasses import dataclass
from typing import Optional

from marketpulse.schemas.analysis import (
    Sentiment,
    TimeframeProfile,
    TrendDirection,
    TrendStrength,
)
from marketpulse.schemas.indicators import IndicatorSnapshot


SENTIMENT_RSI_BULL = 55
SENTIMENT_RSI_BEAR = 45


@dataclass(frozen=True)
class MarketScore:
    """Classification and weighted score for one snapshot."""

    trend_long: TrendDirection
    trend_short: TrendDirection
    trend_strength: TrendStrength
    sentiment: Sentiment
    bull_score: int
    bear_score: int
    neutral_score: int
    bull_pct: int
    bear_pct: int
    neutral_pct: int


def _gt(a: Optional[float], b: Optional[float]) -> bool:
    """a > b, False when either side is undefined."""
    return a is not None and b is not None and a > b


def _lt(a: Optional[float], b: Optional[float]) -> bool:
    return a is not None and b is not None and a < b


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def classify_trend_long(snapshot: IndicatorSnapshot, profile: TimeframeProfile) -> TrendDirection:
    """EMA20/50/200 stack, forced NEUTRAL when ADX is below the profile threshold or undefined."""
    if snapshot.adx is None or snapshot.adx < profile.adx_trend:
        return TrendDirection.NEUTRAL
    if _gt(snapshot.ema20, snapshot.ema50) and _gt(snapshot.ema50, snapshot.ema200):
        return TrendDirection.BULLISH
    if _lt(snapshot.ema20, snapshot.ema50) and _lt(snapshot.ema50, snapshot.ema200):
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


def classify_trend_short(snapshot: IndicatorSnapshot) -> TrendDirection:
    """EMA20 vs EMA50 only."""
    if _gt(snapshot.ema20, snapshot.ema50):
        return TrendDirection.BULLISH
    if _lt(snapshot.ema20, snapshot.ema50):
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


def classify_strength(adx_value: Optional[float], profile: TimeframeProfile) -> TrendStrength:
    if _gt(adx_value, profile.adx_trend + 5):
        return TrendStrength.STRONG
    if _gt(adx_value, profile.adx_trend):
        return TrendStrength.MODERATE
    return TrendStrength.WEAK


def classify_sentiment(snapshot: IndicatorSnapshot) -> Sentiment:
    if _gt(snapshot.rsi, SENTIMENT_RSI_BULL) and _gt(snapshot.macd, snapshot.signal):
        return Sentiment.BULLISH_DOMINANCE
    if _lt(snapshot.rsi, SENTIMENT_RSI_BEAR) and _lt(snapshot.macd, snapshot.signal):
        return Sentiment.BEARISH_DOMINANCE
    return Sentiment.MIXED


def score_market(snapshot: IndicatorSnapshot, profile: TimeframeProfile) -> MarketScore:
    """
    Classify and score a complete snapshot.

    Contributions:
        1. RSI vs profile thresholds: +2 bull / +2 bear / +1 neutral
        2. |MACD - signal| vs neutral band: +2 neutral inside, else +2 to its sign
        3. EMA20 vs EMA50: +1 to the winner, +1 neutral on a tie
        4. ADX confirmation: +2 to a directional long trend when ADX is above
           threshold, else +1 neutral
        5. EMA200 slope: +1 to its sign, +1 neutral when flat, nothing when undefined
    """
    trend_long = classify_trend_long(snapshot, profile)
    trend_short = classify_trend_short(snapshot)

    bull = bear = neutral = 0

    # 1. RSI
    if _gt(snapshot.rsi, profile.rsi_bull):
        bull += 2
    elif _lt(snapshot.rsi, profile.rsi_bear):
        bear += 2
    else:
        neutral += 1

    # 2. MACD vs signal
    macd_diff = snapshot.macd - snapshot.signal
    if abs(macd_diff) < profile.macd_neutral:
        neutral += 2
    elif macd_diff > 0:
        bull += 2
    else:
        bear += 2

    # 3. EMA20 vs EMA50
    if trend_short == TrendDirection.BULLISH:
        bull += 1
    elif trend_short == TrendDirection.BEARISH:
        bear += 1
    else:
        neutral += 1

    # 4. ADX-gated confirmation
    if _gt(snapshot.adx, profile.adx_trend) and trend_long == TrendDirection.BULLISH:
        bull += 2
    elif _gt(snapshot.adx, profile.adx_trend) and trend_long == TrendDirection.BEARISH:
        bear += 2
    else:
        neutral += 1

    # 5. EMA200 slope
    if snapshot.ema200_slope is not None:
        if snapshot.ema200_slope > 0:
            bull += 1
        elif snapshot.ema200_slope < 0:
            bear += 1
        else:
            neutral += 1

    total = (bull + bear + neutral) or 1
    bull_pct = _round_half_up(bull / total * 100)
    # two half-up roundings can overshoot by one point (e.g. 3/8 + 5/8)
    bear_pct = min(_round_half_up(bear / total * 100), 100 - bull_pct)

    return MarketScore(
        trend_long=trend_long,
        trend_short=trend_short,
        trend_strength=classify_strength(snapshot.adx, profile),
        sentiment=classify_sentiment(snapshot),
        bull_score=bull,
        bear_score=bear,
        neutral_score=neutral,
        bull_pct=bull_pct,
        bear_pct=bear_pct,
        neutral_pct=100 - bull_pct - bear_pct,
    )
