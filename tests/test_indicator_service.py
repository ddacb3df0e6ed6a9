"""Tests for building the indicator set from candles."""

import numpy as np

from marketpulse.services.indicators import calculate_indicators, snapshot_last
from tests.conftest import geometric_closes, make_candles


def _series(indicators):
    return {
        "rsi": indicators.rsi,
        "macd": indicators.macd,
        "signal": indicators.signal,
        "histogram": indicators.histogram,
        "ema20": indicators.ema20,
        "ema50": indicators.ema50,
        "ema200": indicators.ema200,
        "adx": indicators.adx,
        "bollinger.upper": indicators.bollinger.upper,
        "bollinger.middle": indicators.bollinger.middle,
        "bollinger.lower": indicators.bollinger.lower,
    }


def test_empty_candles_give_empty_series():
    indicators = calculate_indicators([])

    assert len(indicators) == 0
    for name, series in _series(indicators).items():
        assert len(series) == 0, name
    assert indicators.ema200_slope is None


def test_series_aligned_with_candles():
    candles = make_candles(geometric_closes(210))
    indicators = calculate_indicators(candles)

    for name, series in _series(indicators).items():
        assert len(series) == len(candles), name

    # undefined positions lead, defined ones follow
    first_defined = {
        "ema20": 19,
        "ema50": 49,
        "ema200": 199,
        "rsi": 15,
        "adx": 28,
        "macd": 25,
        "bollinger.middle": 19,
    }
    series = _series(indicators)
    for name, index in first_defined.items():
        assert np.isnan(series[name][:index]).all(), name
        assert not np.isnan(series[name][index:]).any(), name

    assert indicators.ema200_slope is not None


def test_short_series_are_undefined():
    candles = make_candles([100.0 + i for i in range(10)])
    indicators = calculate_indicators(candles)

    assert len(indicators) == 10
    assert np.isnan(indicators.ema20).all()
    assert np.isnan(indicators.rsi).all()
    assert np.isnan(indicators.adx).all()
    assert indicators.ema200_slope is None


def test_to_dict_uses_null_for_undefined():
    candles = make_candles(geometric_closes(30))
    data = calculate_indicators(candles).to_dict()

    assert len(data["ema20"]) == 30
    assert data["ema20"][18] is None
    assert isinstance(data["ema20"][19], float)
    assert data["ema200_slope"] is None


def test_snapshot_last():
    candles = make_candles(geometric_closes(260))
    indicators = calculate_indicators(candles)
    snapshot = snapshot_last(candles, indicators)

    assert snapshot.close == candles[-1].close
    assert snapshot.ema200 == float(indicators.ema200[-1])
    assert snapshot.is_complete
