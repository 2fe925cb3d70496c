"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error envelope shared by all endpoints."""

    error: str


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str


class AnalyzeResponse(BaseModel):
    """Response body for the daily analyze endpoint."""

    ok: bool = True
    summary_date: str
    summary: str
    action_items: List[str] = Field(
        default_factory=list, description="All action items extracted for the date"
    )


class ActionItemResponse(BaseModel):
    id: int
    title: str
    created_at: str


class StoredSummaryResponse(BaseModel):
    """Stored summary with the action items recorded for the same date."""

    summary_date: str
    summary: str
    highlights: Dict[str, Any] = Field(default_factory=dict)
    updated_at: str
    action_items: List[ActionItemResponse] = Field(default_factory=list)
