#!/usr/bin/env python3
"""
Lifelog Digest CLI

Usage:
    python -m src.lifelog_digest analyze --date YYYY-MM-DD [--timezone TZ] [--format json|text]
    python -m src.lifelog_digest fetch [--date YYYY-MM-DD] [--timezone TZ]
    python -m src.lifelog_digest show --date YYYY-MM-DD [--format json|text]
    python -m src.lifelog_digest init-board [--columns Todo Doing Done]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.digest_store import DigestRepository
from src.limitless_client import LimitlessClient

from .analyzer import AnalysisResult, DailyAnalyzer
from .config import Config
from .exceptions import LimitlessAPIError
from .logger import setup_logger

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = ["Todo", "Doing", "Done"]


def format_result_text(result: AnalysisResult) -> str:
    lines = [f"[{result.summary_date}] {result.summary.summary}"]
    if result.action_items:
        lines.append("Action items:")
        lines.extend(f"- {item}" for item in result.action_items)
    else:
        lines.append("No action items.")
    if result.skipped:
        lines.append(f"Skipped {len(result.skipped)} action item(s) that could not be stored.")
    return "\n".join(lines)


def cmd_analyze(analyzer: DailyAnalyzer, date: str, timezone: Optional[str], output_format: str) -> int:
    """日次解析を実行"""
    try:
        result = analyzer.analyze(date, timezone)
    except LimitlessAPIError as exc:
        print(f"Error: Limitless API returned {exc.status_code}: {exc.body}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.exception("analyze failed")
        print(f"Error: analysis failed: {exc}", file=sys.stderr)
        return 1

    if output_format == "json":
        print(json.dumps(result.to_response(), ensure_ascii=False))
    else:
        print(format_result_text(result))
    return 0


def cmd_fetch(client: LimitlessClient, date: Optional[str], timezone: Optional[str]) -> int:
    """ライフログを取得してJSONのまま出力"""
    try:
        page = client.fetch(date, timezone)
    except LimitlessAPIError as exc:
        print(f"Error: Limitless API returned {exc.status_code}: {exc.body}", file=sys.stderr)
        return 1
    except Exception as exc:
        print(f"Error: fetch failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(page.payload, ensure_ascii=False, indent=2))
    return 0


def cmd_show(repo: DigestRepository, date: str, output_format: str) -> int:
    """保存済みサマリーを表示"""
    stored = repo.get_summary(date)
    if not stored:
        print(f"Error: no summary stored for {date}.", file=sys.stderr)
        return 1
    items = repo.list_action_items(date)

    if output_format == "json":
        payload: Dict[str, Any] = {
            "summary_date": stored.summary_date,
            "summary": stored.summary,
            "highlights": stored.highlights,
            "updated_at": stored.updated_at,
            "action_items": [{"id": item.id, "title": item.title} for item in items],
        }
        print(json.dumps(payload, ensure_ascii=False))
    else:
        print(f"[{stored.summary_date}] {stored.summary}")
        for item in items:
            print(f"  #{item.id} {item.title}")
    return 0


def cmd_init_board(repo: DigestRepository, columns: List[str]) -> int:
    """Kanbanカラムを作成（既存はスキップ）"""
    for column in repo.ensure_columns(columns):
        print(f"[{column.id}] {column.name}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lifelog Digest - daily lifelog summaries and action items",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, help="設定ファイルのパス（デフォルト: config/app_config.yaml）")
    parser.add_argument("--db-path", type=str, help="SQLiteデータベースファイルのパス")

    subparsers = parser.add_subparsers(dest="command", help="実行するコマンド", required=True)

    parser_analyze = subparsers.add_parser("analyze", help="ライフログを解析して保存")
    parser_analyze.add_argument("--date", required=True, help="対象日付（YYYY-MM-DD形式）")
    parser_analyze.add_argument("--timezone", help="IANAタイムゾーン")
    parser_analyze.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="出力フォーマット（デフォルト: text）",
    )

    parser_fetch = subparsers.add_parser("fetch", help="ライフログを取得（保存なし）")
    parser_fetch.add_argument("--date", help="対象日付（YYYY-MM-DD形式、省略可）")
    parser_fetch.add_argument("--timezone", help="IANAタイムゾーン")

    parser_show = subparsers.add_parser("show", help="保存済みサマリーを表示")
    parser_show.add_argument("--date", required=True, help="対象日付（YYYY-MM-DD形式）")
    parser_show.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="出力フォーマット（デフォルト: text）",
    )

    parser_board = subparsers.add_parser("init-board", help="Kanbanカラムを作成")
    parser_board.add_argument(
        "--columns",
        nargs="+",
        default=DEFAULT_COLUMNS,
        help="作成するカラム名（デフォルト: Todo Doing Done）",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLIエントリポイント"""
    args = build_parser().parse_args(argv)

    config = Config.load(Path(args.config) if args.config else None)
    if args.db_path:
        config.database.path = args.db_path
    setup_logger(log_level=config.log_level, log_file=config.log_file)

    if args.command == "fetch":
        return cmd_fetch(LimitlessClient.from_config(config.limitless), args.date, args.timezone)

    repo = DigestRepository(db_path=Path(config.database.path))
    if args.command == "analyze":
        return cmd_analyze(DailyAnalyzer(config, repository=repo), args.date, args.timezone, args.format)
    elif args.command == "show":
        return cmd_show(repo, args.date, args.format)
    elif args.command == "init-board":
        return cmd_init_board(repo, args.columns)
    else:
        print(f"Error: 不明なコマンド: {args.command}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
