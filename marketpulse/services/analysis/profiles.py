"""
Timeframe Profiles

Rule thresholds per timeframe. Finer timeframes use a lower ADX trend
threshold and a tighter MACD neutral band; coarser ones keep more bars and
place invalidation further behind the trigger.
"""

from marketpulse.schemas.analysis import TimeframeProfile


# timeframe: (rsi_bull, rsi_bear, macd_neutral, adx_trend, display_window, invalidation_multiplier)
_PROFILE_TABLE = {
    "5M": (55, 45, 0.08, 18, 40, 1.5),
    "15M": (55, 45, 0.10, 18, 60, 2.0),
    "1H": (60, 40, 0.15, 20, 48, 3.0),
    "4H": (55, 45, 0.20, 22, 84, 4.0),
    "1D": (52, 48, 0.15, 20, 120, 6.0),
    "1W": (55, 45, 0.20, 20, 100, 6.0),
}

DEFAULT_PROFILE = TimeframeProfile(
    timeframe="DEFAULT",
    rsi_bull=55,
    rsi_bear=45,
    macd_neutral=0.2,
    adx_trend=20,
    display_window=100,
    invalidation_multiplier=3.0,
)


def _build(timeframe: str, row: tuple) -> TimeframeProfile:
    rsi_bull, rsi_bear, macd_neutral, adx_trend, window, multiplier = row
    return TimeframeProfile(
        timeframe=timeframe,
        rsi_bull=rsi_bull,
        rsi_bear=rsi_bear,
        macd_neutral=macd_neutral,
        adx_trend=adx_trend,
        display_window=window,
        invalidation_multiplier=multiplier,
    )


PROFILES: dict[str, TimeframeProfile] = {
    tf: _build(tf, row) for tf, row in _PROFILE_TABLE.items()
}


def resolve_profile(timeframe: str) -> TimeframeProfile:
    """Profile for a timeframe label (case-insensitive); unknown labels get DEFAULT_PROFILE."""
    key = (timeframe or "").strip().upper()
    return PROFILES.get(key, DEFAULT_PROFILE)
