"""Data models for the Limitless client."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LifelogEntry(BaseModel):
    """One lifelog record.

    Only ``title`` and ``markdown`` are examined; every other field returned by
    the API is kept as-is on the model.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    title: Optional[str] = Field(None, description="Entry title")
    markdown: Optional[str] = Field(None, description="Entry body (markdown)")

    @field_validator("title", "markdown", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        """Scalars become text; objects and lists are dropped instead of failing the record."""
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float, bool)):
            return str(value)
        return None
