"""
Indicator API Endpoints

Raw indicator series for a candle list.
"""

import logging

from fastapi import APIRouter, HTTPException

from marketpulse.schemas.market import AnalysisRequest
from marketpulse.services.data_ingestion import get_candle_service
from marketpulse.services.base import (
    DataUnavailableError,
    ExternalAPIError,
    ValidationError,
)
from marketpulse.services.indicators import calculate_indicators

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def get_indicators(request: AnalysisRequest):
    """
    Get every indicator series for the request's candles.

    Series are aligned with the candles; undefined positions are null.
    """
    candle_service = get_candle_service()
    try:
        candles = await candle_service.get_candles(
            request.symbol, request.timeframe, request.candles
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except DataUnavailableError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ExternalAPIError as e:
        raise HTTPException(status_code=502, detail=e.message)

    indicators = calculate_indicators(candles)
    return {
        "symbol": request.symbol,
        "timeframe": request.timeframe,
        "candles": len(candles),
        "indicators": indicators.to_dict(),
    }
