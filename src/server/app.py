"""FastAPI application bootstrap."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.digest_store import DigestRepository
from src.lifelog_digest.analyzer import DailyAnalyzer
from src.lifelog_digest.config import Config
from src.lifelog_digest.logger import setup_logger
from src.limitless_client import LimitlessClient

from .dependencies import load_config
from .routes import (
    register_analyze_routes,
    register_health_routes,
    register_ingest_routes,
    register_summary_routes,
)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Every route uses ``config`` (or the YAML + environment config when omitted).
    """
    config = config or load_config()
    setup_logger(log_level=config.log_level, log_file=config.log_file)

    app = FastAPI(title="Lifelog Digest API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    repository = DigestRepository(db_path=config.database.path)
    limitless_client = LimitlessClient.from_config(config.limitless)
    app.state.config = config
    app.state.repository = repository
    app.state.limitless_client = limitless_client
    app.state.analyzer = DailyAnalyzer(
        config, limitless_client=limitless_client, repository=repository
    )

    register_health_routes(app)
    register_analyze_routes(app)
    register_ingest_routes(app)
    register_summary_routes(app)

    return app
