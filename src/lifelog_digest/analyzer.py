"""
DailyAnalyzer: ライフログ取得 → サマリー / アクションアイテム抽出 → 永続化

設計方針:
- 設定(Config)は生成時に明示的に渡す
- サマリーのupsert失敗は致命的（SummaryPersistError）。アクションアイテムは処理しない
- アクションアイテム / Kanbanリンクの書き込み失敗は collect-and-continue:
  ログに記録してスキップし、結果の skipped に残す
- 同じ日付で再実行するとアクションアイテムは重複して蓄積される（重複排除しない）
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from src.digest_store import ActionItem, DigestRepository, KanbanItem
from src.journal import DailySummarizer, DailySummary, extract_action_items
from src.limitless_client import LifelogEntry, LimitlessClient

from .config import Config
from .exceptions import SummaryPersistError
from .mistral_client import MistralClient

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """1回の解析実行の結果"""

    summary_date: str
    summary: DailySummary
    action_items: List[str]
    entry_count: int = 0
    inserted: List[ActionItem] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    kanban_items: List[KanbanItem] = field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        """HTTPレスポンス本体（action_items は抽出した全件）"""
        return {
            "ok": True,
            "summary_date": self.summary_date,
            "summary": self.summary.summary,
            "action_items": self.action_items,
        }


class DailyAnalyzer:
    """日次解析パイプライン"""

    def __init__(
        self,
        config: Config,
        limitless_client: Optional[LimitlessClient] = None,
        summarizer: Optional[DailySummarizer] = None,
        repository: Optional[DigestRepository] = None,
    ):
        """
        初期化

        Args:
            config: アプリケーション設定
            limitless_client: Limitlessクライアント（テスト用にDI可能）
            summarizer: サマリー生成器（テスト用にDI可能）
            repository: 永続化リポジトリ（テスト用にDI可能）
        """
        self.config = config
        self.limitless_client = limitless_client or LimitlessClient.from_config(config.limitless)
        self.summarizer = summarizer or DailySummarizer(
            mistral_client=MistralClient.from_config(config.mistral),
            max_summary_chars=config.summary_max_chars,
            max_input_chars=config.mistral.max_input_chars,
        )
        self.repository = repository or DigestRepository(db_path=config.database.path)

    def analyze(self, summary_date: str, timezone: Optional[str] = None) -> AnalysisResult:
        """
        日次解析を実行して永続化する

        Raises:
            LimitlessAPIError: ライフログ取得が2xx以外
            SummaryPersistError: サマリーの保存に失敗
        """
        timezone = timezone or self.config.limitless.default_timezone
        logger.info(f"Analyzing lifelogs for {summary_date} ({timezone})")

        lifelogs = self.limitless_client.fetch_lifelogs(summary_date, timezone)

        summary = self.summarizer.summarize(lifelogs)
        action_items = extract_action_items(self.markdown_blob(lifelogs))
        logger.info(
            f"{len(lifelogs)} lifelogs, {summary.source} summary, {len(action_items)} action items"
        )

        result = AnalysisResult(
            summary_date=summary_date,
            summary=summary,
            action_items=action_items,
            entry_count=len(lifelogs),
        )
        self.persist(result)
        return result

    @staticmethod
    def markdown_blob(lifelogs: Sequence[LifelogEntry]) -> str:
        return "\n".join(entry.markdown or "" for entry in lifelogs)

    def persist(self, result: AnalysisResult) -> AnalysisResult:
        """サマリーをupsertし、アクションアイテムとKanbanリンクを作成する"""
        try:
            self.repository.upsert_summary(
                result.summary_date, result.summary.summary, result.summary.highlights
            )
        except sqlite3.Error as e:
            logger.error(f"Failed to upsert summary for {result.summary_date}: {e}")
            raise SummaryPersistError(str(e)) from e

        for title in result.action_items:
            try:
                result.inserted.append(
                    self.repository.create_action_item(result.summary_date, title)
                )
            except sqlite3.Error as e:
                logger.warning(f"Skipping action item {title!r}: {e}")
                result.skipped.append(title)

        if result.inserted:
            result.kanban_items = self._link_to_board(result.inserted)

        return result

    def _link_to_board(self, items: Sequence[ActionItem]) -> List[KanbanItem]:
        column_name = self.config.database.todo_column
        try:
            column_id = self.repository.find_column_id(column_name)
        except sqlite3.Error as e:
            logger.warning(f"Kanban column lookup failed: {e}")
            return []

        if column_id is None:
            logger.info(f"No '{column_name}' column; action items not added to the board")
            return []

        linked: List[KanbanItem] = []
        for item in items:
            try:
                linked.append(self.repository.create_kanban_item(item.id, column_id))
            except sqlite3.Error as e:
                logger.warning(f"Skipping Kanban link for action item #{item.id}: {e}")
        return linked
