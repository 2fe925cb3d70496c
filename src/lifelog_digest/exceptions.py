"""Exception types shared by the fetch / analyze / persist pipeline."""

from __future__ import annotations

from typing import Optional


class LifelogDigestError(Exception):
    """Base class for pipeline errors."""


class LimitlessAPIError(LifelogDigestError):
    """Non-success response from the Limitless lifelogs API.

    The HTTP entry points mirror ``status_code`` and ``body`` verbatim.
    """

    def __init__(self, status_code: int, body: str, content_type: Optional[str] = None):
        super().__init__(f"Limitless API returned {status_code}: {body[:200]}")
        self.status_code = status_code
        self.body = body
        self.content_type = content_type


class SummaryPersistError(LifelogDigestError):
    """The daily summary upsert failed. Fatal for the request."""


class MistralAPIError(LifelogDigestError):
    """Mistral chat completions call failed or returned an unusable envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
