"""Shared candle builders for the test suite."""

import pytest

from marketpulse.schemas.market import Candle

HOUR_MS = 3_600_000
START_MS = 1_700_000_000_000


def make_candles(closes, spread_ratio=0.001, step_ms=HOUR_MS):
    """Candles whose open is the previous close; high/low sit `spread_ratio` outside the body."""
    candles = []
    prev = closes[0]
    for i, close in enumerate(closes):
        top = max(prev, close)
        bottom = min(prev, close)
        candles.append(
            Candle(
                time=START_MS + i * step_ms,
                open=prev,
                high=top * (1 + spread_ratio),
                low=bottom * (1 - spread_ratio),
                close=close,
                volume=100.0 + i,
            )
        )
        prev = close
    return candles


def geometric_closes(count, start=100.0, growth=1.01):
    """Exponential path: momentum keeps growing so MACD stays above its signal."""
    return [start * growth ** i for i in range(count)]


@pytest.fixture
def uptrend_candles():
    return make_candles(geometric_closes(260, growth=1.01))


@pytest.fixture
def downtrend_candles():
    # accelerating decline keeps MACD below its signal
    return make_candles([1000.0 - 0.01 * i * i for i in range(260)])


@pytest.fixture
def fx_uptrend_candles():
    return make_candles(geometric_closes(260, start=1.05, growth=1.0005), spread_ratio=0.0001)


@pytest.fixture
def box_candles():
    """30 bars ranging 90-110 and closing at 100."""
    return [
        Candle(time=START_MS + i * HOUR_MS, open=100.0, high=110.0, low=90.0, close=100.0, volume=1.0)
        for i in range(30)
    ]
