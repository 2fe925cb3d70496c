from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(slots=True)
class StoredSummary:
    """limitless_summaries の1行。summary_date ごとに1件。"""

    id: int
    summary_date: str
    summary: str
    highlights: Dict[str, Any] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""


@dataclass(slots=True)
class ActionItem:
    """抽出されたアクションアイテム。実行ごとに新規作成（重複排除なし）。"""

    id: int
    summary_date: str
    title: str
    created_at: str


@dataclass(slots=True)
class KanbanColumn:
    id: int
    name: str
    position: int = 0


@dataclass(slots=True)
class KanbanItem:
    """ActionItem と KanbanColumn のリンク。"""

    id: int
    action_item_id: int
    column_id: int
    created_at: str
