"""
DailyAnalyzer（取得→サマリー→抽出→保存）のテスト
"""

import sqlite3
from unittest.mock import MagicMock

import pytest
import requests

from src.digest_store import DigestRepository
from src.journal import DailySummarizer
from src.lifelog_digest.analyzer import DailyAnalyzer
from src.lifelog_digest.config import Config, DatabaseConfig
from src.lifelog_digest.exceptions import LimitlessAPIError, SummaryPersistError
from src.limitless_client import LifelogEntry


@pytest.fixture
def config(tmp_path):
    return Config(database=DatabaseConfig(path=str(tmp_path / "digest.db")), log_file="")


@pytest.fixture
def repo(config):
    return DigestRepository(db_path=config.database.path)


@pytest.fixture
def lifelogs():
    return [
        LifelogEntry(title="Standup", markdown="- [ ] buy milk\n* [ ] buy milk"),
        LifelogEntry(title="Errands", markdown="TODO: call Bob\nrandom note"),
        LifelogEntry(title="", markdown=None),
    ]


@pytest.fixture
def limitless_client(lifelogs):
    client = MagicMock()
    client.fetch_lifelogs.return_value = lifelogs
    return client


def make_analyzer(config, limitless_client, repo, summarizer=None):
    return DailyAnalyzer(
        config,
        limitless_client=limitless_client,
        summarizer=summarizer or DailySummarizer(mistral_client=None),
        repository=repo,
    )


class TestDailyAnalyzer:
    def test_analyze_persists_summary_and_items(self, config, limitless_client, repo):
        repo.ensure_columns(["Todo", "Done"])
        analyzer = make_analyzer(config, limitless_client, repo)

        result = analyzer.analyze("2025-03-01", "Europe/Paris")

        limitless_client.fetch_lifelogs.assert_called_once_with("2025-03-01", "Europe/Paris")
        assert result.action_items == ["buy milk", "call Bob"]
        assert result.summary.summary == "Summary of 3 entries: Standup, Errands"
        assert result.to_response() == {
            "ok": True,
            "summary_date": "2025-03-01",
            "summary": "Summary of 3 entries: Standup, Errands",
            "action_items": ["buy milk", "call Bob"],
        }

        stored = repo.get_summary("2025-03-01")
        assert stored.highlights == {"count": 3, "titles": ["Standup", "Errands"]}
        assert [i.title for i in repo.list_action_items("2025-03-01")] == ["buy milk", "call Bob"]

        todo_id = repo.find_column_id("Todo")
        linked = repo.list_kanban_items(todo_id)
        assert [k.action_item_id for k in linked] == [i.id for i in result.inserted]

    def test_default_timezone(self, config, limitless_client, repo):
        analyzer = make_analyzer(config, limitless_client, repo)

        analyzer.analyze("2025-03-01")

        limitless_client.fetch_lifelogs.assert_called_once_with("2025-03-01", "America/Montreal")

    def test_without_todo_column_no_kanban_items(self, config, limitless_client, repo):
        analyzer = make_analyzer(config, limitless_client, repo)

        result = analyzer.analyze("2025-03-01")

        assert len(result.inserted) == 2
        assert result.kanban_items == []
        assert repo.list_kanban_items() == []

    def test_repeated_runs_accumulate_action_items(self, config, limitless_client, repo):
        analyzer = make_analyzer(config, limitless_client, repo)

        analyzer.analyze("2025-03-01")
        analyzer.analyze("2025-03-01")

        titles = [i.title for i in repo.list_action_items("2025-03-01")]
        assert titles == ["buy milk", "call Bob", "buy milk", "call Bob"]
        with repo._connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM limitless_summaries").fetchone()[0] == 1

    def test_empty_day(self, config, repo):
        client = MagicMock()
        client.fetch_lifelogs.return_value = []
        analyzer = make_analyzer(config, client, repo)

        result = analyzer.analyze("2025-03-01")

        assert result.summary.summary == "No lifelogs found for this date."
        assert result.action_items == []
        assert repo.get_summary("2025-03-01").highlights == {}

    def test_summary_upsert_failure_skips_action_items(self, config, limitless_client):
        repo = MagicMock()
        repo.upsert_summary.side_effect = sqlite3.OperationalError("database is locked")
        analyzer = make_analyzer(config, limitless_client, repo)

        with pytest.raises(SummaryPersistError, match="database is locked"):
            analyzer.analyze("2025-03-01")

        repo.create_action_item.assert_not_called()
        repo.find_column_id.assert_not_called()

    def test_action_item_failure_is_skipped(self, config, limitless_client, repo):
        repo.ensure_columns(["Todo"])
        real_create = repo.create_action_item

        def flaky_create(summary_date, title):
            if title == "buy milk":
                raise sqlite3.IntegrityError("constraint failed")
            return real_create(summary_date, title)

        repo.create_action_item = flaky_create
        analyzer = make_analyzer(config, limitless_client, repo)

        result = analyzer.analyze("2025-03-01")

        assert result.skipped == ["buy milk"]
        assert [i.title for i in result.inserted] == ["call Bob"]
        assert result.action_items == ["buy milk", "call Bob"]
        assert len(result.kanban_items) == 1

    def test_kanban_link_failure_is_tolerated(self, config, limitless_client, repo):
        repo.ensure_columns(["Todo"])
        repo.create_kanban_item = MagicMock(side_effect=sqlite3.OperationalError("boom"))
        analyzer = make_analyzer(config, limitless_client, repo)

        result = analyzer.analyze("2025-03-01")

        assert len(result.inserted) == 2
        assert result.kanban_items == []
        assert repo.create_kanban_item.call_count == 2

    def test_upstream_error_propagates_before_persisting(self, config, repo):
        client = MagicMock()
        client.fetch_lifelogs.side_effect = LimitlessAPIError(401, "unauthorized")
        analyzer = make_analyzer(config, client, repo)

        with pytest.raises(LimitlessAPIError):
            analyzer.analyze("2025-03-01")

        assert repo.get_summary("2025-03-01") is None

    def test_llm_failure_falls_back_to_heuristic(self, config, limitless_client, repo):
        mistral = MagicMock()
        mistral.chat.side_effect = requests.exceptions.Timeout("slow")
        summarizer = DailySummarizer(mistral_client=mistral)
        analyzer = make_analyzer(config, limitless_client, repo, summarizer=summarizer)

        result = analyzer.analyze("2025-03-01")

        assert result.summary.source == "heuristic"
        assert result.summary.summary.startswith("Summary of 3 entries")

    def test_default_wiring_from_config(self, config):
        analyzer = DailyAnalyzer(config)

        assert analyzer.summarizer.mistral_client is None
        assert analyzer.limitless_client.default_timezone == "America/Montreal"
        assert str(analyzer.repository.db_path) == config.database.path
