"""
Yahoo Finance Data Adapter

Fetches candles from Yahoo Finance for symbols the caller did not supply
data for. Symbols are passed through unchanged (Yahoo format, e.g.
"BTC-USD", "EURUSD=X", "GC=F", "^GSPC").
"""

import asyncio
import logging
import math

import yfinance as yf

from marketpulse.core.config import settings
from marketpulse.schemas.market import Candle, Timeframe

logger = logging.getLogger(__name__)


# Timeframe mapping for yfinance (4H has no native interval, see CandleService)
INTERVAL_MAP = {
    Timeframe.M5: "5m",
    Timeframe.M15: "15m",
    Timeframe.H1: "60m",
    Timeframe.D1: "1d",
    Timeframe.W1: "1wk",
}

# History range per timeframe
PERIOD_MAP = {
    Timeframe.M5: "30d",
    Timeframe.M15: "60d",
    Timeframe.H1: "6mo",
    Timeframe.D1: "5y",
    Timeframe.W1: "10y",
}

DEFAULT_INTERVAL = "1d"
DEFAULT_PERIOD = "1mo"


def _lookup(mapping: dict, timeframe: str, default: str) -> str:
    try:
        return mapping.get(Timeframe(timeframe.upper()), default)
    except ValueError:
        return default


def history_params(timeframe: str) -> tuple[str, str]:
    """(interval, period) for a timeframe label."""
    return (
        _lookup(INTERVAL_MAP, timeframe, DEFAULT_INTERVAL),
        _lookup(PERIOD_MAP, timeframe, DEFAULT_PERIOD),
    )


def _is_number(value) -> bool:
    try:
        return value is not None and math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def history_to_candles(hist) -> list[Candle]:
    """
    Convert a yfinance history DataFrame to candles.

    Rows with any missing OHLCV field are skipped.
    """
    candles = []
    for idx, row in hist.iterrows():
        fields = [row.get("Open"), row.get("High"), row.get("Low"), row.get("Close"), row.get("Volume")]
        if not all(_is_number(v) for v in fields):
            continue

        ts = idx.to_pydatetime()
        candles.append(
            Candle(
                time=int(ts.timestamp() * 1000),
                open=float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=float(row["Close"]),
                volume=float(row["Volume"]),
            )
        )
    return candles


async def fetch_yahoo_candles(symbol: str, timeframe: str) -> list[Candle]:
    """
    Fetch candles from Yahoo Finance.

    Args:
        symbol: Yahoo symbol
        timeframe: 5M / 15M / 1H / 1D / 1W (unknown labels use daily bars)

    Returns:
        Chronologically ascending candles (possibly empty)

    Raises:
        Whatever yfinance raises on transport failures; callers wrap it.
    """
    interval, period = history_params(timeframe)
    logger.info(f"Fetching {symbol} from Yahoo Finance (interval={interval}, period={period})...")

    ticker = yf.Ticker(symbol)
    # yfinance is synchronous, run it off the event loop
    loop = asyncio.get_event_loop()
    hist = await loop.run_in_executor(
        None,
        lambda: ticker.history(
            period=period,
            interval=interval,
            timeout=settings.upstream_timeout_seconds,
        ),
    )

    if hist is None or hist.empty:
        logger.warning(f"No data returned for {symbol}")
        return []

    candles = history_to_candles(hist)
    logger.info(f"Fetched {len(candles)} candles for {symbol} ({interval})")
    return candles
