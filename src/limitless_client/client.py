"""HTTP client for the Limitless lifelogs API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from src.lifelog_digest.config import DEFAULT_TIMEZONE, LimitlessConfig
from src.lifelog_digest.exceptions import LimitlessAPIError

from .models import LifelogEntry

logger = logging.getLogger(__name__)


@dataclass
class LifelogPage:
    """Decoded body of a successful ``GET /v1/lifelogs`` call."""

    status_code: int
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def lifelogs(self) -> List[LifelogEntry]:
        """Entries under ``data.lifelogs``; missing keys yield an empty list."""
        data = self.payload.get("data") if isinstance(self.payload, dict) else None
        records = data.get("lifelogs") if isinstance(data, dict) else None
        return [LifelogEntry.model_validate(record) for record in records or [] if isinstance(record, dict)]


class LimitlessClient:
    """
    Limitless APIクライアント

    One GET per call, no retries. Non-success responses raise
    :class:`LimitlessAPIError` carrying the upstream status and body.
    """

    def __init__(
        self,
        api_key: str = "",
        api_url: str = "https://api.limitless.ai/v1/lifelogs",
        default_timezone: str = DEFAULT_TIMEZONE,
        limit: int = 10,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.default_timezone = default_timezone
        self.limit = limit
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: LimitlessConfig) -> "LimitlessClient":
        return cls(
            api_key=config.api_key,
            api_url=config.api_url,
            default_timezone=config.default_timezone,
            limit=config.limit,
            timeout=config.timeout_seconds,
        )

    def build_params(self, date: Optional[str] = None, timezone: Optional[str] = None) -> Dict[str, str]:
        """Query parameters; ``date`` is omitted when not given."""
        params: Dict[str, str] = {}
        if date:
            params["date"] = date
        params["timezone"] = timezone or self.default_timezone
        params["limit"] = str(self.limit)
        return params

    def fetch(self, date: Optional[str] = None, timezone: Optional[str] = None) -> LifelogPage:
        """
        ライフログ取得

        Args:
            date: 対象日付（YYYY-MM-DD、省略可）
            timezone: IANAタイムゾーン（省略時はdefault_timezone）

        Returns:
            LifelogPage

        Raises:
            LimitlessAPIError: 2xx以外のレスポンス
            requests.exceptions.RequestException: 通信エラー
        """
        params = self.build_params(date, timezone)
        logger.info("Fetching lifelogs date=%s timezone=%s", params.get("date"), params["timezone"])

        response = requests.get(
            self.api_url,
            params=params,
            headers={"X-API-Key": self.api_key or ""},
            timeout=self.timeout,
        )
        if not response.ok:
            logger.error("Limitless API error %s: %s", response.status_code, response.text[:200])
            raise LimitlessAPIError(
                response.status_code,
                response.text,
                response.headers.get("Content-Type"),
            )

        return LifelogPage(status_code=response.status_code, payload=response.json())

    def fetch_lifelogs(self, date: Optional[str] = None, timezone: Optional[str] = None) -> List[LifelogEntry]:
        """Fetch and decode the entries for ``date``."""
        lifelogs = self.fetch(date, timezone).lifelogs
        logger.info("Fetched %d lifelogs", len(lifelogs))
        return lifelogs
