"""
DailySummarizer: ライフログの日次サマリー生成器

設計方針:
- Mistral APIキーが設定されていればLLMでサマリーを生成
- LLMが未設定・失敗の場合はタイトル連結のヒューリスティックにフォールバック
- サマリー本文は最大1000文字（超過分は切り捨て）

関連:
- src/lifelog_digest/mistral_client.py: LLM推論
- src/limitless_client/models.py: LifelogEntry
"""

import json
import logging
from typing import Any, Dict, Optional, Sequence

import requests

from src.lifelog_digest.exceptions import MistralAPIError
from src.lifelog_digest.mistral_client import MistralClient
from src.limitless_client.models import LifelogEntry

from .models import DailySummary, SummaryOutcome, SummaryStatus

logger = logging.getLogger(__name__)

EMPTY_SUMMARY = "No lifelogs found for this date."
ENTRY_SEPARATOR = "\n---\n"

SYSTEM_PROMPT = """You summarize one day of a person's lifelog recordings.
Write 5-8 short bullet points covering the main events, decisions and people,
and list any action items mentioned.

Reply with a single JSON object and nothing else:
{
    "summary": "the bullet points as one string, one bullet per line",
    "highlights": {
        "bullets": ["bullet 1", "bullet 2", ...],
        "action_items": ["action item 1", ...]
    }
}
"""


class DailySummarizer:
    """ライフログの日次サマリー生成器"""

    def __init__(
        self,
        mistral_client: Optional[MistralClient] = None,
        max_summary_chars: int = 1000,
        max_input_chars: int = 8000,
    ):
        """
        初期化

        Args:
            mistral_client: Mistralクライアント（Noneの場合はヒューリスティックのみ）
            max_summary_chars: サマリー本文の最大文字数
            max_input_chars: LLMに渡すエントリ本文の最大文字数
        """
        self.mistral_client = mistral_client
        self.max_summary_chars = max_summary_chars
        self.max_input_chars = max_input_chars

    def summarize(self, lifelogs: Sequence[LifelogEntry], use_llm: bool = True) -> DailySummary:
        """
        日次サマリー生成

        Args:
            lifelogs: 対象日のライフログ
            use_llm: LLMを使用して自然言語サマリーを生成するか

        Returns:
            DailySummary
        """
        if not lifelogs:
            return DailySummary(summary=EMPTY_SUMMARY, highlights={})

        if use_llm:
            outcome = self.summarize_with_llm(lifelogs)
            if outcome.ok:
                return outcome.summary
            if outcome.status is SummaryStatus.ERROR:
                logger.warning(f"LLM summary failed ({outcome.error}); using heuristic summary")
            else:
                logger.debug("LLM summary unavailable; using heuristic summary")

        return self.summarize_heuristic(lifelogs)

    def summarize_heuristic(self, lifelogs: Sequence[LifelogEntry]) -> DailySummary:
        """タイトル連結による簡易サマリー"""
        if not lifelogs:
            return DailySummary(summary=EMPTY_SUMMARY, highlights={})

        titles = [entry.title for entry in lifelogs if entry.title]
        summary = f"Summary of {len(lifelogs)} entries: {', '.join(titles)}"
        return DailySummary(
            summary=summary[: self.max_summary_chars],
            highlights={"count": len(lifelogs), "titles": titles},
        )

    def summarize_with_llm(self, lifelogs: Sequence[LifelogEntry]) -> SummaryOutcome:
        """
        LLMでサマリー生成（リトライなし）

        Returns:
            SummaryOutcome: success / unavailable（未設定） / error（呼び出し失敗）
        """
        if self.mistral_client is None:
            return SummaryOutcome.unavailable()

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": self.build_prompt(lifelogs)},
        ]

        try:
            reply = self.mistral_client.chat(messages, return_json=True)
        except (requests.exceptions.RequestException, MistralAPIError) as e:
            logger.error(f"Error generating LLM summary: {e}")
            return SummaryOutcome.failed(str(e))

        summary = self._parse_reply(reply)
        if summary is None:
            logger.warning("LLM reply has no summary text")
            return SummaryOutcome.failed("LLM reply has no summary")
        return SummaryOutcome.success(summary)

    def build_prompt(self, lifelogs: Sequence[LifelogEntry]) -> str:
        """エントリ本文（タイトル + markdown）を連結し、上限文字数で切り詰める"""
        blocks = []
        for entry in lifelogs:
            parts = [part for part in (entry.title, entry.markdown) if part]
            blocks.append("\n".join(parts))
        entries_text = ENTRY_SEPARATOR.join(blocks)[: self.max_input_chars]

        return f"Here are today's lifelog entries:\n\n{entries_text}"

    def _parse_reply(self, reply: str) -> Optional[DailySummary]:
        """LLM応答をパース。JSONでなければ応答テキストをそのままサマリーにする

        Returns:
            DailySummary。JSONに空でないsummaryが無い場合はNone
        """
        try:
            data = json.loads(reply)
        except json.JSONDecodeError:
            if not reply.strip():
                return None
            logger.warning("LLM reply is not JSON; using raw text as summary")
            return DailySummary(
                summary=reply[: self.max_summary_chars], highlights={}, source="mistral"
            )

        if not isinstance(data, dict):
            return DailySummary(
                summary=reply[: self.max_summary_chars], highlights={}, source="mistral"
            )

        summary = data.get("summary")
        if isinstance(summary, list):
            summary = "\n".join(str(line) for line in summary)
        elif summary is not None and not isinstance(summary, str):
            summary = json.dumps(summary, ensure_ascii=False)
        if not summary or not summary.strip():
            return None

        return DailySummary(
            summary=summary[: self.max_summary_chars],
            highlights=self._normalize_highlights(data.get("highlights")),
            source="mistral",
        )

    @staticmethod
    def _normalize_highlights(highlights: Any) -> Dict[str, Any]:
        if isinstance(highlights, dict):
            return highlights
        if isinstance(highlights, list):
            return {"bullets": highlights}
        return {}
