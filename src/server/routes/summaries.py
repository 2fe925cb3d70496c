"""Read-back of stored daily summaries."""

from __future__ import annotations

import asyncio
import logging

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse

from src.digest_store import DigestRepository

from ..dependencies import get_repository
from ..schemas import ActionItemResponse, ErrorResponse, StoredSummaryResponse

logger = logging.getLogger(__name__)


def register_summary_routes(app: FastAPI) -> None:
    """Register summary lookup endpoints."""

    @app.get(
        "/summaries/{summary_date}",
        response_model=StoredSummaryResponse,
        responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def get_summary(
        summary_date: str, repo: DigestRepository = Depends(get_repository)
    ):
        """Stored summary and action items for ``summary_date``."""
        try:
            stored = await asyncio.to_thread(repo.get_summary, summary_date)
            if stored is None:
                return JSONResponse(status_code=404, content={"error": "Summary not found"})
            items = await asyncio.to_thread(repo.list_action_items, summary_date)
            return StoredSummaryResponse(
                summary_date=stored.summary_date,
                summary=stored.summary,
                highlights=stored.highlights,
                updated_at=stored.updated_at,
                action_items=[
                    ActionItemResponse(id=item.id, title=item.title, created_at=item.created_at)
                    for item in items
                ],
            )
        except Exception as exc:
            logger.exception("Failed to load summary %s: %s", summary_date, exc)
            return JSONResponse(status_code=500, content={"error": str(exc)})
