"""
Analysis API Endpoints

Market assessment for a symbol/timeframe.
"""

import logging

from fastapi import APIRouter, HTTPException

from marketpulse.schemas.analysis import AnalysisResult
from marketpulse.schemas.market import AnalysisRequest
from marketpulse.services.analysis import get_analysis_service
from marketpulse.services.base import (
    DataUnavailableError,
    ExternalAPIError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=AnalysisResult)
async def analyze(request: AnalysisRequest):
    """
    Produce the market assessment.

    Uses the candles in the body when present; otherwise candles are
    fetched from Yahoo Finance (4H rebuilt from 1H).

    Returns:
        - Trend labels, sentiment and bull/bear/neutral percentages
        - Key support/resistance and three candidates each side
        - At most one bullish or bearish scenario
        - Volatility, risk level and bilingual narrative
    """
    service = get_analysis_service()
    try:
        return await service.execute(request)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DataUnavailableError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ExternalAPIError as e:
        raise HTTPException(status_code=502, detail=e.message)
    except Exception as e:
        logger.exception(f"Analysis failed for {request.symbol} {request.timeframe}")
        raise HTTPException(status_code=500, detail=f"Internal error: {e}")
