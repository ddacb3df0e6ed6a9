"""End-to-end tests for the analysis engine and AnalysisService."""

import asyncio

import pytest

from marketpulse.schemas.analysis import (
    RiskLevel,
    ScenarioStatus,
    TrendDirection,
)
from marketpulse.schemas.market import AnalysisRequest
from marketpulse.services.analysis import AnalysisService, generate_analysis
from marketpulse.services.data_ingestion import CandleServiceInterface
from tests.conftest import make_candles


class StubCandleService(CandleServiceInterface):
    def __init__(self, candles):
        self.candles = candles
        self.calls = []

    async def get_candles(self, symbol, timeframe, candles=None):
        self.calls.append((symbol, timeframe))
        return candles or self.candles

    async def health_check(self):
        return True


def _assert_consistent(result):
    assert result.bull_pct + result.bear_pct + result.neutral_pct == 100
    assert not (result.bullish_scenario and result.bearish_scenario)
    supports = result.supports
    resistances = result.resistances
    assert supports.s1 >= supports.s2 >= supports.s3
    assert resistances.r1 <= resistances.r2 <= resistances.r3
    assert supports.s1 < result.price < resistances.r1


class TestInsufficientData:
    def test_no_candles(self):
        result = generate_analysis("AAPL", "1H", [])
        assert (result.bull_pct, result.bear_pct, result.neutral_pct) == (0, 0, 100)
        assert result.risk_level == RiskLevel.UNKNOWN
        assert result.price is None

    def test_none_candles(self):
        assert generate_analysis("AAPL", "1H", None).neutral_pct == 100

    def test_too_short_for_macd(self):
        candles = make_candles([100.0 + i for i in range(20)])
        result = generate_analysis("AAPL", "1H", candles)
        assert result.neutral_pct == 100
        assert result.bullish_scenario is None

    def test_missing_last_close(self, uptrend_candles):
        candles = uptrend_candles[:-1] + [uptrend_candles[-1].model_copy(update={"close": None})]
        assert generate_analysis("AAPL", "1H", candles).risk_level == RiskLevel.UNKNOWN


class TestDirectionalMarkets:
    def test_uptrend(self, uptrend_candles):
        result = generate_analysis("AAPL", "1h", uptrend_candles)

        assert result.timeframe == "1H"
        assert result.trend_long == TrendDirection.BULLISH
        assert result.trend_short == TrendDirection.BULLISH
        assert result.bear_pct == 0
        assert result.bull_pct > result.neutral_pct
        assert result.price == pytest.approx(uptrend_candles[-1].close)

        scenario = result.bullish_scenario
        assert scenario is not None
        assert result.bearish_scenario is None
        assert scenario.status == ScenarioStatus.PENDING
        assert scenario.trigger > result.price
        assert scenario.target1 < scenario.target2
        assert scenario.invalidation < scenario.trigger
        assert result.active_scenario == "none"
        assert result.opinion.en.startswith("Potential bullish scenario")
        assert result.risk_level in (RiskLevel.LOW, RiskLevel.MEDIUM)
        _assert_consistent(result)

    def test_downtrend(self, downtrend_candles):
        result = generate_analysis("AAPL", "4H", downtrend_candles)

        assert result.trend_long == TrendDirection.BEARISH
        assert result.trend_short == TrendDirection.BEARISH
        assert result.bull_pct == 0
        assert result.bullish_scenario is None

        scenario = result.bearish_scenario
        assert scenario is not None
        assert scenario.trigger < result.price
        assert scenario.target2 < scenario.target1 < scenario.trigger
        assert scenario.invalidation > scenario.trigger
        _assert_consistent(result)

    def test_currency_pair_precision(self, fx_uptrend_candles):
        result = generate_analysis("EURUSD", "1H", fx_uptrend_candles)

        scenario = result.bullish_scenario
        assert scenario is not None
        assert scenario.decimals == 5
        assert scenario.target1 - scenario.trigger == pytest.approx(0.0003, abs=1e-5)
        assert scenario.target2 - scenario.trigger == pytest.approx(0.0006, abs=1e-5)
        assert result.key_support == round(result.key_support, 5)

    def test_yahoo_fx_symbol_precision(self, fx_uptrend_candles):
        result = generate_analysis("EURUSD=X", "1H", fx_uptrend_candles)

        scenario = result.bullish_scenario
        assert scenario.decimals == 4
        assert scenario.trigger == round(scenario.trigger, 4)
        assert result.key_resistance == round(result.key_resistance, 4)

    def test_inverted_bar_does_not_break_analysis(self, uptrend_candles):
        last = uptrend_candles[-1]
        inverted = last.model_copy(update={"high": last.low, "low": last.high})
        result = generate_analysis("AAPL", "1H", uptrend_candles[:-1] + [inverted])

        assert result.volatility_pct >= 0
        assert result.bull_pct + result.bear_pct + result.neutral_pct == 100

    def test_crypto_precision(self, uptrend_candles):
        result = generate_analysis("BTC-USD", "1D", uptrend_candles)
        assert result.key_resistance == round(result.key_resistance, 1)
        assert result.bullish_scenario.decimals == 1

    def test_texts_are_bilingual(self, uptrend_candles):
        result = generate_analysis("AAPL", "1H", uptrend_candles)
        assert "Análisis técnico (1H)" in result.analysis_text.es
        assert "Technical analysis (1H)" in result.analysis_text.en
        assert result.scenario_summary.en in result.analysis_text.en


def test_deterministic(uptrend_candles):
    first = generate_analysis("AAPL", "1H", uptrend_candles)
    second = generate_analysis("AAPL", "1H", uptrend_candles)
    exclude = {"generated_at"}
    assert first.model_dump(exclude=exclude) == second.model_dump(exclude=exclude)


def test_accepts_candle_dicts(uptrend_candles):
    as_dicts = [c.model_dump() for c in uptrend_candles]
    from_dicts = generate_analysis("AAPL", "1H", as_dicts)
    from_models = generate_analysis("AAPL", "1H", uptrend_candles)
    assert from_dicts.bull_pct == from_models.bull_pct
    assert from_dicts.key_support == from_models.key_support


class TestAnalysisService:
    def test_fetches_candles_when_absent(self, uptrend_candles):
        stub = StubCandleService(uptrend_candles)
        service = AnalysisService(candle_service=stub)

        result = asyncio.run(service.execute(AnalysisRequest(symbol="AAPL", timeframe="1h")))

        assert stub.calls == [("AAPL", "1H")]
        assert result.trend_long == TrendDirection.BULLISH

    def test_uses_request_candles(self, downtrend_candles):
        service = AnalysisService(candle_service=StubCandleService([]))
        request = AnalysisRequest(symbol="AAPL", timeframe="4H", candles=downtrend_candles)

        result = asyncio.run(service.execute(request))

        assert result.trend_long == TrendDirection.BEARISH

    def test_health_check(self):
        service = AnalysisService(candle_service=StubCandleService([]))
        assert asyncio.run(service.health_check()) is True
