"""Route registration helpers."""

from .analyze import register_analyze_routes
from .health import register_health_routes
from .ingest import register_ingest_routes
from .summaries import register_summary_routes

__all__ = [
    "register_analyze_routes",
    "register_health_routes",
    "register_ingest_routes",
    "register_summary_routes",
]
