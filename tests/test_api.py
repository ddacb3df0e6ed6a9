"""Tests for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from marketpulse.api.v1.endpoints import analysis as analysis_endpoint
from marketpulse.main import app
from marketpulse.services.analysis import AnalysisService
from marketpulse.services.base import ExternalAPIError
from marketpulse.services.data_ingestion import CandleService, CandleServiceInterface


class FailingCandleService(CandleServiceInterface):
    def __init__(self, error):
        self.error = error

    async def get_candles(self, symbol, timeframe, candles=None):
        raise self.error

    async def health_check(self):
        return False


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def offline_service(monkeypatch):
    service = AnalysisService(candle_service=CandleService(enable_live_data=False))
    monkeypatch.setattr(analysis_endpoint, "get_analysis_service", lambda: service)
    return service


def _payload(candles, symbol="AAPL", timeframe="1H"):
    return {
        "symbol": symbol,
        "timeframe": timeframe,
        "candles": [c.model_dump() for c in candles],
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_analysis(client, uptrend_candles, offline_service):
    response = client.post("/api/v1/analysis", json=_payload(uptrend_candles))

    assert response.status_code == 200
    body = response.json()
    assert body["trend_long"] == "BULLISH"
    assert body["bull_pct"] + body["bear_pct"] + body["neutral_pct"] == 100
    assert body["bullish_scenario"]["direction"] == "bullish"
    assert body["bearish_scenario"] is None
    assert set(body["analysis_text"]) == {"es", "en"}


def test_analysis_insufficient_data(client, offline_service):
    response = client.post(
        "/api/v1/analysis",
        json={"symbol": "AAPL", "timeframe": "1H", "candles": [{"time": 1, "close": 10.0}]},
    )
    assert response.status_code == 200
    assert response.json()["neutral_pct"] == 100


def test_blank_symbol_rejected(client):
    response = client.post("/api/v1/analysis", json={"symbol": "  ", "timeframe": "1H"})
    assert response.status_code == 422


def test_no_candles_without_live_data(client, offline_service):
    response = client.post("/api/v1/analysis", json={"symbol": "AAPL", "timeframe": "1H"})
    assert response.status_code == 404


@pytest.mark.parametrize(
    "error,status",
    [
        (ExternalAPIError("CandleService", "upstream down"), 502),
        (RuntimeError("unexpected"), 500),
    ],
)
def test_error_mapping(client, monkeypatch, error, status):
    service = AnalysisService(candle_service=FailingCandleService(error))
    monkeypatch.setattr(analysis_endpoint, "get_analysis_service", lambda: service)

    response = client.post("/api/v1/analysis", json={"symbol": "AAPL", "timeframe": "1H"})

    assert response.status_code == status


def test_indicators(client, uptrend_candles, monkeypatch):
    from marketpulse.api.v1.endpoints import indicators as indicators_endpoint

    monkeypatch.setattr(
        indicators_endpoint,
        "get_candle_service",
        lambda: CandleService(enable_live_data=False),
    )
    response = client.post("/api/v1/indicators", json=_payload(uptrend_candles))

    assert response.status_code == 200
    body = response.json()
    assert body["candles"] == len(uptrend_candles)
    assert len(body["indicators"]["rsi"]) == len(uptrend_candles)
    assert body["indicators"]["rsi"][0] is None
    assert body["indicators"]["ema200"][-1] is not None


def test_unordered_candles_rejected(client, uptrend_candles, offline_service):
    payload = _payload(list(reversed(uptrend_candles)))

    response = client.post("/api/v1/analysis", json=payload)

    assert response.status_code == 400
    assert "chronological order" in response.json()["detail"]
