"""
Candle Resampler

Aggregates finer candles into coarser synthetic bars, e.g. 4H bars from
1H data when the upstream source has no native 4H interval.
"""

import logging
from typing import Sequence

from marketpulse.schemas.market import Candle

logger = logging.getLogger(__name__)


def _extreme(values, pick):
    known = [v for v in values if v is not None]
    return pick(known) if known else None


def _aggregate(group: Sequence[Candle]) -> Candle:
    return Candle(
        time=group[0].time,
        open=group[0].open,
        high=_extreme((c.high for c in group), max),
        low=_extreme((c.low for c in group), min),
        close=group[-1].close,
        volume=sum(c.volume for c in group),
    )


def resample_candles(candles: Sequence[Candle], factor: int) -> list[Candle]:
    """
    Group candles into non-overlapping chunks of `factor` bars.

    A trailing chunk shorter than `factor` is dropped. Empty input gives
    an empty list.
    """
    if factor < 1:
        raise ValueError(f"Resample factor must be >= 1, got {factor}")

    result = []
    for i in range(0, len(candles) - factor + 1, factor):
        result.append(_aggregate(candles[i : i + factor]))

    dropped = len(candles) - len(result) * factor
    if dropped:
        logger.debug(f"Resampler dropped {dropped} trailing candle(s) (factor={factor})")

    return result


def reconstruct_4h_from_1h(candles: Sequence[Candle]) -> list[Candle]:
    """Build 4H bars from consecutive 1H bars."""
    return resample_candles(candles, 4)
