"""Daily analyze endpoint: fetch, summarize, extract action items, persist."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Response
from fastapi.responses import JSONResponse

from src.lifelog_digest.analyzer import DailyAnalyzer
from src.lifelog_digest.exceptions import LimitlessAPIError

from ..dependencies import get_analyzer
from ..schemas import AnalyzeResponse, ErrorResponse

logger = logging.getLogger(__name__)

MISSING_DATE_ERROR = "Missing date (YYYY-MM-DD)"


def register_analyze_routes(app: FastAPI) -> None:
    """Register the analyze-and-persist endpoint."""

    @app.get(
        "/daily_analyze",
        response_model=AnalyzeResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def daily_analyze(
        date: Optional[str] = None,
        timezone: Optional[str] = None,
        analyzer: DailyAnalyzer = Depends(get_analyzer),
    ):
        """Analyze the lifelogs of ``date`` and store the summary and action items."""
        if not date:
            return JSONResponse(status_code=400, content={"error": MISSING_DATE_ERROR})

        try:
            result = await asyncio.to_thread(analyzer.analyze, date, timezone or None)
            return AnalyzeResponse(**result.to_response())
        except LimitlessAPIError as exc:
            return Response(
                content=exc.body, status_code=exc.status_code, media_type=exc.content_type
            )
        except Exception as exc:
            logger.exception("Daily analyze failed for %s: %s", date, exc)
            return JSONResponse(status_code=500, content={"error": str(exc)})
