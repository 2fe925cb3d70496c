"""Raw lifelog fetch endpoint (no summarization, no persistence)."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Response
from fastapi.responses import JSONResponse

from src.lifelog_digest.exceptions import LimitlessAPIError
from src.limitless_client import LimitlessClient

from ..dependencies import get_limitless_client
from ..schemas import ErrorResponse

logger = logging.getLogger(__name__)


def register_ingest_routes(app: FastAPI) -> None:
    """Register the Limitless proxy endpoint."""

    @app.get("/limitless_ingest", responses={500: {"model": ErrorResponse}})
    async def limitless_ingest(
        date: Optional[str] = None,
        timezone: Optional[str] = None,
        client: LimitlessClient = Depends(get_limitless_client),
    ):
        """Proxy ``GET /v1/lifelogs``; ``date`` is optional."""
        try:
            page = await asyncio.to_thread(client.fetch, date or None, timezone or None)
            return JSONResponse(status_code=page.status_code, content=page.payload)
        except LimitlessAPIError as exc:
            return Response(
                content=exc.body, status_code=exc.status_code, media_type=exc.content_type
            )
        except Exception as exc:
            logger.exception("Lifelog ingest failed: %s", exc)
            return JSONResponse(status_code=500, content={"error": str(exc)})
