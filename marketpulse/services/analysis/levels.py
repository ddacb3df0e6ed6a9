"""
Support / Resistance and Scenario Levels

Derives key levels, three candidate supports and resistances, and the
trigger / target / invalidation prices for both directions. Also owns
the asset-class conventions: pip size for currency pairs and the display
precision of each symbol.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from marketpulse.schemas.analysis import TimeframeProfile, TrendDirection
from marketpulse.schemas.indicators import IndicatorSnapshot
from marketpulse.schemas.market import Candle
from marketpulse.services.indicators.calculations import atr
from marketpulse.services.indicators.service import candles_to_arrays


LEVEL_WINDOW = 30
TRIGGER_BUFFER_RATIO = 0.0002
ATR_FALLBACK_RATIO = 0.003
FX_TARGET_PIPS = (3, 6)
FX_PAD_PIPS = 5
CANDIDATE_COUNT = 3
YAHOO_FX_DECIMALS = 4

CURRENCY_CODES = {"USD", "EUR", "JPY", "GBP", "AUD", "NZD", "CAD", "CHF"}

_PAIR_PATTERN = re.compile(r"([A-Z]{3})[/\-]?([A-Z]{3})")

# Exact-symbol display precision
_SYMBOL_DECIMALS = {
    "BTC-USD": 1,
    "ETH-USD": 2,
    "SOL-USD": 3,
    "XRP-USD": 4,
    "ADA-USD": 4,
    "NG=F": 3,
    "HG=F": 4,
    "GC=F": 2,
    "SI=F": 2,
    "CL=F": 2,
}


# =============================================================================
# ASSET CLASS
# =============================================================================


@dataclass(frozen=True)
class PipSpec:
    """Pip convention of a currency pair."""

    decimals: int
    pip: float


def _normalize(symbol: str) -> str:
    return (symbol or "").strip().upper()


def is_currency_pair(symbol: str) -> bool:
    """
    Yahoo FX tickers ("EURUSD=X", "JPY=X") or two distinct ISO codes
    ("EURUSD", "EUR/USD", "EUR-USD").
    """
    s = _normalize(symbol)
    if s.endswith("=X"):
        return True
    match = _PAIR_PATTERN.fullmatch(s)
    if not match:
        return False
    base, quote = match.groups()
    return base != quote and base in CURRENCY_CODES and quote in CURRENCY_CODES


def pip_spec(symbol: str) -> Optional[PipSpec]:
    """Pip size and precision for currency pairs, None for other assets."""
    if not is_currency_pair(symbol):
        return None
    if "JPY" in _normalize(symbol):
        return PipSpec(decimals=3, pip=0.01)
    return PipSpec(decimals=5, pip=0.0001)


def display_decimals(symbol: str) -> int:
    """Number of decimals used when showing prices of `symbol`."""
    s = _normalize(symbol)

    if s in _SYMBOL_DECIMALS:
        return _SYMBOL_DECIMALS[s]
    if "-USD" in s:
        return 5

    fx = pip_spec(s)
    if fx is not None:
        # Yahoo "=X" quotes are shown to 4 decimals, JPY crosses keep pip precision
        if s.endswith("=X") and "JPY" not in s:
            return YAHOO_FX_DECIMALS
        return fx.decimals

    if "JPY" in s:
        return 2

    # indices ("^GSPC"), equities and everything else
    return 2


# =============================================================================
# LEVELS
# =============================================================================


@dataclass(frozen=True)
class LevelSet:
    """Raw (unrounded) levels for one assessment."""

    price: float
    atr: float
    key_support: float
    key_resistance: float
    supports: tuple[float, float, float]
    resistances: tuple[float, float, float]
    bullish_trigger: float
    bearish_trigger: float
    bullish_targets: tuple[float, float]
    bearish_targets: tuple[float, float]
    bullish_invalidation: float
    bearish_invalidation: float


def effective_atr(candles: Sequence[Candle], price: float) -> float:
    """ATR(14) over the candles; price * 0.003 when undefined or zero."""
    highs, lows, closes = candles_to_arrays(candles)
    value = atr(highs, lows, closes, 14)
    if not value:
        return price * ATR_FALLBACK_RATIO
    return value


def _finite(values: np.ndarray) -> list[float]:
    return [float(v) for v in values if math.isfinite(v)]


def _pad(levels: list[float], start: float, step: float) -> list[float]:
    """Extend to CANDIDATE_COUNT entries, stepping from the last level (or `start`)."""
    padded = list(levels[:CANDIDATE_COUNT])
    anchor = padded[-1] if padded else start
    while len(padded) < CANDIDATE_COUNT:
        anchor += step
        padded.append(anchor)
    return padded


def _pad_from_first(levels: list[float], start: float, step: float) -> list[float]:
    """Extend to CANDIDATE_COUNT entries at first + step * n; the first defaults to `start` + step."""
    padded = list(levels[:CANDIDATE_COUNT]) or [start + step]
    first = padded[0]
    while len(padded) < CANDIDATE_COUNT:
        padded.append(first + step * len(padded))
    return padded


def compute_levels(
    candles: Sequence[Candle],
    snapshot: IndicatorSnapshot,
    trend_long: TrendDirection,
    profile: TimeframeProfile,
    symbol: str,
) -> LevelSet:
    """
    Levels from the most recent LEVEL_WINDOW bars plus EMA50/EMA200.

    `candles` is the display window; `snapshot.close` must be defined.
    """
    price = snapshot.close
    atr_value = effective_atr(candles, price)

    highs, lows, _ = candles_to_arrays(candles[-LEVEL_WINDOW:])
    window_highs = _finite(highs)
    window_lows = _finite(lows)
    raw_resistance = max(window_highs) if window_highs else price
    raw_support = min(window_lows) if window_lows else price

    dynamic = [v for v in (snapshot.ema50, snapshot.ema200) if v is not None]

    key_resistance = max([raw_resistance, *dynamic])
    key_support = min([raw_support, *dynamic])

    resistances = sorted(v for v in [raw_resistance, *dynamic] if v > price)
    supports = sorted((v for v in [raw_support, *dynamic] if v < price), reverse=True)

    buffer = price * TRIGGER_BUFFER_RATIO
    bullish_trigger = key_resistance + buffer
    bearish_trigger = key_support - buffer

    bullish_targets = (bullish_trigger + atr_value, bullish_trigger + atr_value * 2)
    bearish_targets = (bearish_trigger - atr_value, bearish_trigger - atr_value * 2)

    fx = pip_spec(symbol)
    if fx is None:
        resistances = _pad(resistances, price, atr_value)
        supports = _pad(supports, price, -atr_value)
    else:
        near, far = FX_TARGET_PIPS
        if trend_long == TrendDirection.BULLISH:
            bullish_targets = (
                round(bullish_trigger + fx.pip * near, fx.decimals),
                round(bullish_trigger + fx.pip * far, fx.decimals),
            )
        elif trend_long == TrendDirection.BEARISH:
            bearish_targets = (
                round(bearish_trigger - fx.pip * near, fx.decimals),
                round(bearish_trigger - fx.pip * far, fx.decimals),
            )

        step = fx.pip * FX_PAD_PIPS
        resistances = [
            round(v, fx.decimals)
            for v in _pad_from_first([round(r, fx.decimals) for r in resistances], price, step)
        ]
        supports = [
            round(v, fx.decimals)
            for v in _pad_from_first([round(s, fx.decimals) for s in supports], price, -step)
        ]

    multiplier = profile.invalidation_multiplier

    return LevelSet(
        price=price,
        atr=atr_value,
        key_support=key_support,
        key_resistance=key_resistance,
        supports=tuple(supports),
        resistances=tuple(resistances),
        bullish_trigger=bullish_trigger,
        bearish_trigger=bearish_trigger,
        bullish_targets=bullish_targets,
        bearish_targets=bearish_targets,
        bullish_invalidation=bullish_trigger - atr_value * multiplier,
        bearish_invalidation=bearish_trigger + atr_value * multiplier,
    )
