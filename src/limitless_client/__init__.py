"""Limitless lifelogs API client.

Fetches a day's lifelog records (``GET /v1/lifelogs``) for the digest pipeline.
"""

from .client import LimitlessClient, LifelogPage
from .models import LifelogEntry

__all__ = [
    "LifelogEntry",
    "LifelogPage",
    "LimitlessClient",
]
