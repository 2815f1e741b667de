"""Analysis API routes."""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from swing_engine.models.schemas import AnalysisError
from swing_engine.services.alpha_vantage import MarketDataError
from swing_engine.services.analysis_service import AnalysisService
from swing_engine.services.report_formatter import DISCLAIMER, format_report

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache
def get_analysis_service() -> AnalysisService:
    return AnalysisService()


@router.get("/{symbol}")
async def get_analysis(
    symbol: str,
    format: str = Query("json", description="Response format: json or text"),
    service: AnalysisService = Depends(get_analysis_service),
):
    """Score a symbol and return its verdict, signals, and price band."""
    try:
        result = await service.analyze_symbol(symbol)
    except MarketDataError as e:
        logger.error(f"Analysis request failed for {symbol}: {e}")
        return {"success": False, "message": f"{e} (check key / rate limit / network)"}

    if format == "text":
        return PlainTextResponse(format_report(symbol, result))

    if isinstance(result, AnalysisError):
        return {"success": False, "message": result.error}
    return {"success": True, "data": result.display(), "disclaimer": DISCLAIMER}
