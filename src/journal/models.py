from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SummaryStatus(str, Enum):
    """LLMサマリー呼び出しの結果区分。"""

    SUCCESS = "success"
    UNAVAILABLE = "unavailable"  # APIキー未設定
    ERROR = "error"  # 通信エラー / 2xx以外 / 応答形式不正


@dataclass(slots=True)
class DailySummary:
    """1日分のサマリー本文とハイライト。"""

    summary: str
    highlights: Dict[str, Any] = field(default_factory=dict)
    source: str = "heuristic"  # "heuristic" | "mistral"


@dataclass(slots=True)
class SummaryOutcome:
    """Result of the delegated (LLM) summarizer."""

    status: SummaryStatus
    summary: Optional[DailySummary] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is SummaryStatus.SUCCESS and self.summary is not None

    @classmethod
    def success(cls, summary: DailySummary) -> "SummaryOutcome":
        return cls(status=SummaryStatus.SUCCESS, summary=summary)

    @classmethod
    def unavailable(cls) -> "SummaryOutcome":
        return cls(status=SummaryStatus.UNAVAILABLE)

    @classmethod
    def failed(cls, error: str) -> "SummaryOutcome":
        return cls(status=SummaryStatus.ERROR, error=error)
