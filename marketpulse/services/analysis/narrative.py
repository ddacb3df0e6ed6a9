"""
Risk & Narrative Composer

Volatility and risk rating, plus the bilingual texts shown to the user.
Templates only - no free-form generation.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from marketpulse.schemas.analysis import (
    AnalysisResult,
    BilingualText,
    RiskLevel,
    Scenario,
    ScenarioStatus,
    Sentiment,
    TrendDirection,
    TrendStrength,
    VolatilityLevel,
)
from marketpulse.schemas.market import Candle


VOLATILITY_WINDOW = 20
VOLATILITY_LOW_MAX = 0.6
VOLATILITY_MEDIUM_MAX = 1.2

RISK_LOW_MAX = 2
RISK_MEDIUM_MAX = 4

# Trigger distance (% of price) bands for the risk score
DISTANCE_NEAR = 0.15
DISTANCE_MID = 0.35


# =============================================================================
# LABEL TRANSLATIONS
# =============================================================================

TREND_LABELS = {
    TrendDirection.BULLISH: BilingualText(es="ALCISTA", en="Bullish"),
    TrendDirection.BEARISH: BilingualText(es="BAJISTA", en="Bearish"),
    TrendDirection.NEUTRAL: BilingualText(es="NEUTRAL", en="Neutral"),
}

STRENGTH_LABELS = {
    TrendStrength.STRONG: BilingualText(es="Fuerte", en="Strong"),
    TrendStrength.MODERATE: BilingualText(es="Moderada", en="Moderate"),
    TrendStrength.WEAK: BilingualText(es="Débil", en="Weak"),
}

SENTIMENT_LABELS = {
    Sentiment.BULLISH_DOMINANCE: BilingualText(es="Predominio alcista", en="Bullish dominance"),
    Sentiment.BEARISH_DOMINANCE: BilingualText(es="Predominio bajista", en="Bearish dominance"),
    Sentiment.MIXED: BilingualText(es="Mixto", en="Mixed"),
}

RISK_EXPLANATIONS = {
    RiskLevel.LOW: BilingualText(
        es="Escenario estable: baja probabilidad de invalidación temprana.",
        en="Stable scenario: low probability of early invalidation.",
    ),
    RiskLevel.MEDIUM: BilingualText(
        es="Escenario razonable con cierta probabilidad de ruido.",
        en="Reasonable scenario with some likelihood of noise.",
    ),
    RiskLevel.HIGH: BilingualText(
        es="Escenario frágil: alta probabilidad de invalidación temprana.",
        en="Fragile scenario: high probability of early invalidation.",
    ),
    RiskLevel.UNKNOWN: BilingualText(
        es="No hay datos suficientes para evaluar el riesgo.",
        en="Not enough data to assess the risk.",
    ),
}

NO_SCENARIO_SUMMARY = BilingualText(
    es=(
        "No se plantean escenarios claros en este momento debido a señales "
        "mixtas o falta de coherencia en las condiciones."
    ),
    en=(
        "No clear scenarios at this time due to mixed signals or lack of "
        "coherence in market conditions."
    ),
)


# =============================================================================
# VOLATILITY & RISK
# =============================================================================


@dataclass(frozen=True)
class VolatilityAssessment:
    pct: float
    level: VolatilityLevel


def assess_volatility(candles: Sequence[Candle], price: float) -> VolatilityAssessment:
    """
    Average high-low range of the last VOLATILITY_WINDOW bars as % of price.

    Inverted bars (high < low) count as a zero range.
    """
    ranges = [
        max(c.high - c.low, 0.0)
        for c in candles[-VOLATILITY_WINDOW:]
        if c.high is not None and c.low is not None and math.isfinite(c.high - c.low)
    ]
    avg_range = sum(ranges) / len(ranges) if ranges else 0.0
    pct = avg_range / price * 100 if price > 0 else 0.0

    if pct > VOLATILITY_MEDIUM_MAX:
        level = VolatilityLevel.HIGH
    elif pct > VOLATILITY_LOW_MAX:
        level = VolatilityLevel.MEDIUM
    else:
        level = VolatilityLevel.LOW

    return VolatilityAssessment(pct=pct, level=level)


def assess_risk(
    volatility: VolatilityLevel, price: float, scenario: Optional[Scenario]
) -> RiskLevel:
    """Volatility points (0-2) plus trigger-distance points (0-2)."""
    score = {VolatilityLevel.HIGH: 2, VolatilityLevel.MEDIUM: 1}.get(volatility, 0)

    if scenario is not None and price > 0:
        distance = abs(price - scenario.trigger) / price * 100
        if distance < DISTANCE_NEAR:
            score += 0
        elif distance < DISTANCE_MID:
            score += 1
        else:
            score += 2

    if score <= RISK_LOW_MAX:
        return RiskLevel.LOW
    if score <= RISK_MEDIUM_MAX:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


# =============================================================================
# TEXTS
# =============================================================================


def scenario_summary(
    bullish: Optional[Scenario], bearish: Optional[Scenario]
) -> BilingualText:
    scenario = bullish or bearish
    if scenario is None:
        return NO_SCENARIO_SUMMARY

    t1 = scenario.format_price(scenario.target1)
    t2 = scenario.format_price(scenario.target2)
    if scenario is bullish:
        title = BilingualText(es="📈 Escenario alcista", en="📈 Bullish scenario")
    else:
        title = BilingualText(es="📉 Escenario bajista", en="📉 Bearish scenario")

    return BilingualText(
        es=(
            f"{title.es}\n"
            f"• {scenario.activation_text.es}\n"
            f"• 🎯 Objetivos: {t1} y {t2}\n"
            f"• ❌ Invalidación: {scenario.invalidation_text.es}"
        ),
        en=(
            f"{title.en}\n"
            f"• {scenario.activation_text.en}\n"
            f"• 🎯 Targets: {t1} and {t2}\n"
            f"• ❌ Invalidation: {scenario.invalidation_text.en}"
        ),
    )


def opinion_text(
    bullish: Optional[Scenario], bearish: Optional[Scenario]
) -> BilingualText:
    if bullish is not None:
        if bullish.status == ScenarioStatus.ACTIVATED:
            return BilingualText(
                es="Escenario alcista activado: el mercado respalda una continuación al alza mientras no se alcance la invalidación.",
                en="Bullish scenario activated: the market supports continuation to the upside unless invalidation is reached.",
            )
        return BilingualText(
            es="Escenario alcista potencial: podría activarse si el precio rompe la zona de activación.",
            en="Potential bullish scenario: could activate if the price breaks the activation zone.",
        )

    if bearish is not None:
        if bearish.status == ScenarioStatus.ACTIVATED:
            return BilingualText(
                es="Escenario bajista activado: el mercado respalda una continuación a la baja mientras no se alcance la invalidación.",
                en="Bearish scenario activated: the market supports continuation to the downside unless invalidation is reached.",
            )
        return BilingualText(
            es="Escenario bajista potencial: podría activarse si el precio rompe la zona de activación.",
            en="Potential bearish scenario: could activate if the price breaks the activation zone.",
        )

    return BilingualText(
        es="No hay escenarios claros: el mercado muestra señales mixtas o sin dirección definida.",
        en="No clear scenarios: the market shows mixed or directionless signals.",
    )


def analysis_text(
    symbol: str,
    timeframe: str,
    trend_long: TrendDirection,
    trend_short: TrendDirection,
    strength: TrendStrength,
    sentiment: Sentiment,
    key_support: str,
    key_resistance: str,
    summary: BilingualText,
) -> BilingualText:
    """Full report: trends, strength, sentiment, key levels and scenario summary."""
    long_label = TREND_LABELS[trend_long]
    short_label = TREND_LABELS[trend_short]
    strength_label = STRENGTH_LABELS[strength]
    sentiment_label = SENTIMENT_LABELS[sentiment]
    rule = "———————————————✦———————————————"

    return BilingualText(
        es=(
            f"📊 Análisis técnico ({timeframe}) — {symbol}\n{rule}\n\n"
            f"• **Tendencia general:** {long_label.es}\n"
            f"• **Tendencia de corto plazo:** {short_label.es}\n\n"
            f"• **Fuerza de la tendencia:** {strength_label.es}\n"
            f"• **Sentimiento del mercado:** {sentiment_label.es}\n\n"
            f"• **Soporte clave:** {key_support}\n"
            f"• **Resistencia clave:** {key_resistance}\n\n"
            f"{summary.es}"
        ),
        en=(
            f"📊 Technical analysis ({timeframe}) — {symbol}\n{rule}\n\n"
            f"• **General trend:** {long_label.en}\n"
            f"• **Short-term trend:** {short_label.en}\n\n"
            f"• **Trend strength:** {strength_label.en}\n"
            f"• **Market sentiment:** {sentiment_label.en}\n\n"
            f"• **Key support:** {key_support}\n"
            f"• **Key resistance:** {key_resistance}\n\n"
            f"{summary.en}"
        ),
    )


# =============================================================================
# INSUFFICIENT DATA
# =============================================================================


def insufficient_data_result(symbol: str, timeframe: str) -> AnalysisResult:
    """Fixed neutral assessment when the last bar or momentum values are undefined."""
    return AnalysisResult(
        symbol=symbol,
        timeframe=timeframe,
        trend_long=TrendDirection.NEUTRAL,
        trend_short=TrendDirection.NEUTRAL,
        trend_strength=TrendStrength.WEAK,
        sentiment=Sentiment.MIXED,
        bull_pct=0,
        bear_pct=0,
        neutral_pct=100,
        opinion=BilingualText(
            es="Datos insuficientes para generar un análisis fiable.",
            en="Insufficient data to produce a reliable analysis.",
        ),
        bullish_scenario=None,
        bearish_scenario=None,
        active_scenario="none",
        price=None,
        volatility_pct=0.0,
        volatility_level=VolatilityLevel.UNKNOWN,
        risk_level=RiskLevel.UNKNOWN,
        risk_explanation=RISK_EXPLANATIONS[RiskLevel.UNKNOWN],
        scenario_summary=NO_SCENARIO_SUMMARY,
        analysis_text=BilingualText(
            es="⚠️ No hay suficientes velas para generar un análisis consistente.",
            en="⚠️ Not enough candles to produce a consistent analysis.",
        ),
        generated_at=datetime.now(timezone.utc),
    )
