"""
MarketPulse Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketpulse.core.config import settings
from marketpulse.api.v1 import router as api_v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Live data: {settings.enable_live_data}")

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    MarketPulse Technical Analysis API

    ## Architecture
    - **Candle Ingestion**: Caller candles or Yahoo Finance (4H rebuilt from 1H)
    - **Indicator Engine**: EMA, RSI, MACD, Bollinger Bands, ADX, ATR (pure Python/NumPy)
    - **Scoring Engine**: Trend, sentiment and bull/bear/neutral weighting
    - **Level & Scenario Engine**: Support/resistance, triggers, targets, invalidation
    - **Narrative**: Risk rating and bilingual (ES/EN) explanation

    ## Core Principles
    - Deterministic: same candles, same assessment
    - Insufficient data yields a neutral result, never an error
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "MarketPulse Analysis API",
        "docs": "/docs",
        "health": "/health",
    }
