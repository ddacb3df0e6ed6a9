"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
All math is deterministic.

Every function returns a series with the same length as its input.
Positions without enough history are NaN.
"""

import math
import numpy as np
from typing import Optional


def _nan_series(length: int) -> np.ndarray:
    return np.full(length, np.nan)


def as_series(values) -> np.ndarray:
    """Coerce a sequence to a float array, mapping None and non-finite values to NaN."""
    return np.array(
        [v if v is not None and math.isfinite(v) else np.nan for v in values],
        dtype=float,
    )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the SMA of the first `period` values."""
    data = np.asarray(data, dtype=float)
    result = _nan_series(len(data))
    if len(data) < period:
        return result

    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = data[i] * multiplier + result[i - 1] * (1 - multiplier)

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    return 100 - (100 / (1 + avg_gain / avg_loss))


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index.

    The first value sits at index period + 1 and uses the deltas 1..period.
    Later values apply Wilder smoothing to each new delta.
    """
    closes = np.asarray(closes, dtype=float)
    result = _nan_series(len(closes))
    first_index = period + 1
    if len(closes) <= first_index:
        return result

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)
    # NaN deltas must stay undefined instead of counting as "no move"
    gains[np.isnan(deltas)] = np.nan
    losses[np.isnan(deltas)] = np.nan

    avg_gain = np.sum(gains[:period]) / period
    avg_loss = np.sum(losses[:period]) / period

    result[first_index] = _rsi_value(avg_gain, avg_loss)

    # deltas[i - 1] is the move into bar i
    for i in range(first_index + 1, len(closes)):
        avg_gain = (avg_gain * (period - 1) + gains[i - 1]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i - 1]) / period
        result[i] = _rsi_value(avg_gain, avg_loss)

    return result


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    Undefined MACD entries count as 0 when seeding the signal EMA.

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    signal_line = ema(np.where(np.isnan(macd_line), 0.0, macd_line), signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """Bar-over-bar true range; index 0 is NaN (no previous close)."""
    highs = np.asarray(highs, dtype=float)
    lows = np.asarray(lows, dtype=float)
    closes = np.asarray(closes, dtype=float)

    tr = _nan_series(len(closes))
    if len(closes) < 2:
        return tr

    prev_close = closes[:-1]
    tr[1:] = np.maximum.reduce([
        highs[1:] - lows[1:],
        np.abs(highs[1:] - prev_close),
        np.abs(lows[1:] - prev_close),
    ])
    return tr


def atr(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> Optional[float]:
    """
    Average True Range of the latest bar.

    Plain mean of the last `period` true ranges; None with fewer than
    period + 1 bars or a non-finite result.
    """
    if len(closes) < period + 1:
        return None

    tr = true_range(highs, lows, closes)[1:]
    value = float(np.mean(tr[-period:]))
    return value if math.isfinite(value) else None


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands.

    Rolling mean from a running sum; population standard deviation
    recomputed over the trailing window on every bar.

    Returns: (upper, middle, lower)
    """
    closes = np.asarray(closes, dtype=float)
    upper = _nan_series(len(closes))
    middle = _nan_series(len(closes))
    lower = _nan_series(len(closes))

    if len(closes) < period:
        return upper, middle, lower

    running_sum = float(np.sum(closes[:period]))

    for i in range(period - 1, len(closes)):
        if i > period - 1:
            running_sum += closes[i] - closes[i - period]

        mean = running_sum / period
        window = closes[i - period + 1 : i + 1]
        std = math.sqrt(np.sum((window - mean) ** 2) / period)

        middle[i] = mean
        upper[i] = mean + std_dev * std
        lower[i] = mean - std_dev * std

    return upper, middle, lower


# =============================================================================
# TREND INDICATORS
# =============================================================================


def _wilder_sum(values: np.ndarray, period: int) -> np.ndarray:
    """Wilder running sum: seed = sum of bars 1..period, then prev - prev/period + new."""
    out = np.zeros(len(values))
    out[period] = np.sum(values[1 : period + 1])
    for i in range(period + 1, len(values)):
        out[i] = out[i - 1] - out[i - 1] / period + values[i]
    return out


def adx(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> np.ndarray:
    """
    Average Directional Index.

    Needs at least 2 * period bars; the first value sits at index 2 * period
    and is the mean DX of the preceding `period` bars.
    """
    highs = np.asarray(highs, dtype=float)
    lows = np.asarray(lows, dtype=float)
    closes = np.asarray(closes, dtype=float)

    length = len(closes)
    result = _nan_series(length)
    start = period * 2
    if length <= start:
        return result

    up_move = np.zeros(length)
    down_move = np.zeros(length)
    up_move[1:] = highs[1:] - highs[:-1]
    down_move[1:] = lows[:-1] - lows[1:]

    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

    tr = true_range(highs, lows, closes)
    tr[0] = 0.0

    smoothed_tr = _wilder_sum(tr, period)
    smoothed_plus = _wilder_sum(plus_dm, period)
    smoothed_minus = _wilder_sum(minus_dm, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = 100 * smoothed_plus / smoothed_tr
        minus_di = 100 * smoothed_minus / smoothed_tr

    di_sum = plus_di + minus_di
    di_sum = np.where(di_sum == 0, 1.0, di_sum)
    dx = 100 * np.abs(plus_di - minus_di) / di_sum

    result[start] = np.sum(dx[period:start]) / period
    for i in range(start + 1, length):
        result[i] = (result[i - 1] * (period - 1) + dx[i]) / period

    return result


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def last_value(arr: np.ndarray) -> Optional[float]:
    """Value at the last position, or None when empty or undefined."""
    if len(arr) == 0:
        return None
    value = float(arr[-1])
    return value if math.isfinite(value) else None


def slope(arr: np.ndarray, bars: int = 5) -> Optional[float]:
    """(last - value `bars` positions from the end) / bars, when both are defined."""
    if len(arr) < bars:
        return None
    latest = last_value(arr)
    earlier = float(arr[-bars])
    if latest is None or not math.isfinite(earlier):
        return None
    return (latest - earlier) / bars
