"""Tests for candle acquisition."""

import asyncio

import pytest

from marketpulse.services.base import DataUnavailableError, ExternalAPIError, ValidationError
from marketpulse.services.data_ingestion import CandleService
from marketpulse.services.data_ingestion import service as candle_module
from tests.conftest import make_candles


def _patch_fetch(monkeypatch, result=None, error=None):
    calls = []

    async def fake_fetch(symbol, timeframe):
        calls.append((symbol, timeframe))
        if error is not None:
            raise error
        return result

    monkeypatch.setattr(candle_module, "fetch_yahoo_candles", fake_fetch)
    return calls


def test_caller_candles_pass_through(monkeypatch):
    calls = _patch_fetch(monkeypatch, result=[])
    candles = make_candles([1.0, 2.0, 3.0])

    result = asyncio.run(CandleService(enable_live_data=True).get_candles("AAPL", "1H", candles))

    assert result == candles
    assert calls == []


def test_live_data_disabled():
    with pytest.raises(DataUnavailableError):
        asyncio.run(CandleService(enable_live_data=False).get_candles("AAPL", "1H"))


def test_fetches_requested_timeframe(monkeypatch):
    candles = make_candles([1.0, 2.0])
    calls = _patch_fetch(monkeypatch, result=candles)

    result = asyncio.run(CandleService(enable_live_data=True).get_candles("AAPL", "1d"))

    assert calls == [("AAPL", "1D")]
    assert result == candles


def test_four_hour_bars_rebuilt_from_hourly(monkeypatch):
    hourly = make_candles([float(i) + 1 for i in range(9)])
    calls = _patch_fetch(monkeypatch, result=hourly)

    result = asyncio.run(CandleService(enable_live_data=True).get_candles("AAPL", "4H"))

    assert calls == [("AAPL", "1H")]
    assert len(result) == 2
    assert result[0].close == hourly[3].close


def test_upstream_failure(monkeypatch):
    _patch_fetch(monkeypatch, error=ConnectionError("boom"))

    with pytest.raises(ExternalAPIError) as exc_info:
        asyncio.run(CandleService(enable_live_data=True).get_candles("AAPL", "1H"))

    assert exc_info.value.details["error"] == "boom"


def test_empty_upstream(monkeypatch):
    _patch_fetch(monkeypatch, result=[])

    with pytest.raises(DataUnavailableError):
        asyncio.run(CandleService(enable_live_data=True).get_candles("AAPL", "1H"))


def test_out_of_order_candles_rejected():
    candles = make_candles([1.0, 2.0, 3.0])
    shuffled = [candles[0], candles[2], candles[1]]

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(CandleService(enable_live_data=False).get_candles("AAPL", "1H", shuffled))

    assert exc_info.value.details["time"] == candles[1].time
