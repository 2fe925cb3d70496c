"""Dependency helpers shared across FastAPI routes.

``create_app`` builds the singletons from its config and keeps them on
``app.state``; the helpers below hand them to the routes.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from src.digest_store import DigestRepository
from src.lifelog_digest.analyzer import DailyAnalyzer
from src.lifelog_digest.config import Config
from src.limitless_client import LimitlessClient


@lru_cache(maxsize=1)
def load_config() -> Config:
    """Configuration from config/app_config.yaml plus environment overrides."""
    return Config.load()


def get_repository(request: Request) -> DigestRepository:
    """Application-wide DigestRepository."""
    return request.app.state.repository


def get_limitless_client(request: Request) -> LimitlessClient:
    """Application-wide LimitlessClient."""
    return request.app.state.limitless_client


def get_analyzer(request: Request) -> DailyAnalyzer:
    """Application-wide DailyAnalyzer wired from the app config."""
    return request.app.state.analyzer
