from __future__ import annotations

import json
import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .models import ActionItem, KanbanColumn, KanbanItem, StoredSummary


class DigestRepository:
    """SQLiteベースの日次サマリー・アクションアイテム・Kanban管理。"""

    def __init__(self, db_path: Optional[Path] = None):
        root = Path(__file__).resolve().parents[2]
        default_path = root / "data" / "lifelog_digest.db"
        env_path = os.getenv("LIFELOG_DIGEST_DB_PATH")
        if db_path:
            self.db_path = Path(db_path)
        elif env_path:
            self.db_path = Path(env_path)
        else:
            self.db_path = default_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _initialize(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS limitless_summaries (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    summary_date TEXT NOT NULL UNIQUE,
                    summary TEXT NOT NULL,
                    highlights_json TEXT NOT NULL DEFAULT '{}',
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS action_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    summary_date TEXT NOT NULL,
                    title TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kanban_columns (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    position INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kanban_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    action_item_id INTEGER NOT NULL REFERENCES action_items(id),
                    column_id INTEGER NOT NULL REFERENCES kanban_columns(id),
                    created_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_action_items_date ON action_items(summary_date)"
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_kanban_column_name ON kanban_columns(name)")
            conn.commit()

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    @staticmethod
    def _row_to_summary(row: sqlite3.Row) -> StoredSummary:
        return StoredSummary(
            id=row["id"],
            summary_date=row["summary_date"],
            summary=row["summary"],
            highlights=json.loads(row["highlights_json"] or "{}"),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _row_to_action_item(row: sqlite3.Row) -> ActionItem:
        return ActionItem(
            id=row["id"],
            summary_date=row["summary_date"],
            title=row["title"],
            created_at=row["created_at"],
        )

    # --- summaries -----------------------------------------------------

    def upsert_summary(
        self, summary_date: str, summary: str, highlights: Optional[Dict[str, Any]] = None
    ) -> StoredSummary:
        """summary_date をキーにサマリーを作成または上書きする。"""
        now = self._now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO limitless_summaries (summary_date, summary, highlights_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(summary_date) DO UPDATE SET
                    summary = excluded.summary,
                    highlights_json = excluded.highlights_json,
                    updated_at = excluded.updated_at
                """,
                (summary_date, summary, json.dumps(highlights or {}, ensure_ascii=False), now, now),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM limitless_summaries WHERE summary_date = ?", (summary_date,)
            ).fetchone()
        return self._row_to_summary(row)

    def get_summary(self, summary_date: str) -> Optional[StoredSummary]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM limitless_summaries WHERE summary_date = ?", (summary_date,)
            ).fetchone()
        return self._row_to_summary(row) if row else None

    # --- action items --------------------------------------------------

    def create_action_item(self, summary_date: str, title: str) -> ActionItem:
        now = self._now()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO action_items (summary_date, title, created_at) VALUES (?, ?, ?)",
                (summary_date, title, now),
            )
            conn.commit()
            row = conn.execute(
                "SELECT * FROM action_items WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()
        return self._row_to_action_item(row)

    def list_action_items(self, summary_date: str) -> List[ActionItem]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM action_items WHERE summary_date = ? ORDER BY id ASC",
                (summary_date,),
            ).fetchall()
        return [self._row_to_action_item(row) for row in rows]

    # --- kanban --------------------------------------------------------

    def find_column_id(self, name: str) -> Optional[int]:
        """名前でカラムを検索（作成はしない）。"""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id FROM kanban_columns WHERE name = ? ORDER BY id ASC LIMIT 1", (name,)
            ).fetchone()
        return row["id"] if row else None

    def list_columns(self) -> List[KanbanColumn]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM kanban_columns ORDER BY position ASC, id ASC"
            ).fetchall()
        return [KanbanColumn(id=row["id"], name=row["name"], position=row["position"]) for row in rows]

    def create_column(self, name: str, position: int = 0) -> KanbanColumn:
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO kanban_columns (name, position) VALUES (?, ?)", (name, position)
            )
            conn.commit()
        return KanbanColumn(id=cursor.lastrowid, name=name, position=position)

    def ensure_columns(self, names: Iterable[str]) -> List[KanbanColumn]:
        """存在しないカラムだけを作成し、全カラムを返す。"""
        existing = {column.name for column in self.list_columns()}
        offset = len(existing)
        for name in names:
            if name in existing:
                continue
            self.create_column(name, position=offset)
            existing.add(name)
            offset += 1
        return self.list_columns()

    def create_kanban_item(self, action_item_id: int, column_id: int) -> KanbanItem:
        now = self._now()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO kanban_items (action_item_id, column_id, created_at) VALUES (?, ?, ?)",
                (action_item_id, column_id, now),
            )
            conn.commit()
        return KanbanItem(
            id=cursor.lastrowid, action_item_id=action_item_id, column_id=column_id, created_at=now
        )

    def list_kanban_items(self, column_id: Optional[int] = None) -> List[KanbanItem]:
        query = "SELECT * FROM kanban_items"
        params: list[object] = []
        if column_id is not None:
            query += " WHERE column_id = ?"
            params.append(column_id)
        with self._connect() as conn:
            rows = conn.execute(query + " ORDER BY id ASC", params).fetchall()
        return [
            KanbanItem(
                id=row["id"],
                action_item_id=row["action_item_id"],
                column_id=row["column_id"],
                created_at=row["created_at"],
            )
            for row in rows
        ]
