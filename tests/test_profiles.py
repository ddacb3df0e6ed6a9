"""Tests for timeframe profiles."""

from marketpulse.services.analysis.profiles import DEFAULT_PROFILE, PROFILES, resolve_profile


def test_known_profiles():
    hourly = resolve_profile("1H")
    assert (hourly.rsi_bull, hourly.rsi_bear) == (60, 40)
    assert hourly.macd_neutral == 0.15
    assert hourly.adx_trend == 20
    assert hourly.display_window == 48
    assert hourly.invalidation_multiplier == 3.0

    daily = resolve_profile("1D")
    assert (daily.rsi_bull, daily.rsi_bear) == (52, 48)
    assert daily.display_window == 120
    assert daily.invalidation_multiplier == 6.0


def test_lookup_is_case_insensitive():
    assert resolve_profile("5m") is PROFILES["5M"]
    assert resolve_profile(" 4h ") is PROFILES["4H"]


def test_unknown_timeframe_uses_default():
    profile = resolve_profile("3M")
    assert profile is DEFAULT_PROFILE
    assert profile.adx_trend == 20
    assert profile.display_window == 100


def test_weekly_profile():
    weekly = resolve_profile("1W")
    assert weekly.display_window == 100
    assert weekly.invalidation_multiplier == 6.0


def test_finer_timeframes_trend_earlier():
    assert resolve_profile("5M").adx_trend < resolve_profile("4H").adx_trend
    assert resolve_profile("5M").macd_neutral < resolve_profile("4H").macd_neutral
