import sqlite3
from unittest.mock import MagicMock, patch

import pytest
import requests
from fastapi.testclient import TestClient

from src.digest_store import DigestRepository
from src.journal import DailySummarizer
from src.lifelog_digest.analyzer import DailyAnalyzer
from src.lifelog_digest.config import Config, DatabaseConfig, LimitlessConfig
from src.lifelog_digest.exceptions import LimitlessAPIError
from src.limitless_client import LifelogEntry, LifelogPage
from src.server.app import create_app
from src.server.dependencies import get_analyzer, get_limitless_client, get_repository


@pytest.fixture
def config(tmp_path):
    return Config(database=DatabaseConfig(path=str(tmp_path / "api.db")), log_file="")


@pytest.fixture
def repo(config):
    return DigestRepository(db_path=config.database.path)


@pytest.fixture
def limitless_client():
    client = MagicMock()
    client.fetch_lifelogs.return_value = [
        LifelogEntry(title="Planning", markdown="- [ ] buy milk\n* [ ] buy milk\nTODO: call Bob\nrandom note"),
    ]
    return client


def create_test_client(config, repo, limitless_client, summarizer=None) -> TestClient:
    app = create_app(config)
    analyzer = DailyAnalyzer(
        config,
        limitless_client=limitless_client,
        summarizer=summarizer or DailySummarizer(mistral_client=None),
        repository=repo,
    )
    app.dependency_overrides[get_analyzer] = lambda: analyzer
    app.dependency_overrides[get_limitless_client] = lambda: limitless_client
    app.dependency_overrides[get_repository] = lambda: repo
    return TestClient(app)


def test_health(config, repo, limitless_client):
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_daily_analyze_missing_date(config, repo, limitless_client):
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/daily_analyze")

    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing date (YYYY-MM-DD)"}
    limitless_client.fetch_lifelogs.assert_not_called()


def test_daily_analyze_flow(config, repo, limitless_client):
    repo.ensure_columns(["Todo"])
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/daily_analyze", params={"date": "2025-03-01", "timezone": "Asia/Tokyo"})

    assert resp.status_code == 200
    assert resp.json() == {
        "ok": True,
        "summary_date": "2025-03-01",
        "summary": "Summary of 1 entries: Planning",
        "action_items": ["buy milk", "call Bob"],
    }
    limitless_client.fetch_lifelogs.assert_called_once_with("2025-03-01", "Asia/Tokyo")

    resp = client.get("/summaries/2025-03-01")
    assert resp.status_code == 200
    stored = resp.json()
    assert stored["summary"] == "Summary of 1 entries: Planning"
    assert stored["highlights"] == {"count": 1, "titles": ["Planning"]}
    assert [item["title"] for item in stored["action_items"]] == ["buy milk", "call Bob"]
    assert len(repo.list_kanban_items(repo.find_column_id("Todo"))) == 2


def test_daily_analyze_mirrors_upstream_error(config, repo, limitless_client):
    limitless_client.fetch_lifelogs.side_effect = LimitlessAPIError(
        403, '{"message":"forbidden"}', "application/json"
    )
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/daily_analyze", params={"date": "2025-03-01"})

    assert resp.status_code == 403
    assert resp.text == '{"message":"forbidden"}'


def test_daily_analyze_transport_error(config, repo, limitless_client):
    limitless_client.fetch_lifelogs.side_effect = requests.exceptions.ConnectionError("dns failure")
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/daily_analyze", params={"date": "2025-03-01"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "dns failure"}


def test_daily_analyze_summary_write_failure(config, limitless_client):
    repo = MagicMock()
    repo.upsert_summary.side_effect = sqlite3.OperationalError("disk I/O error")
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/daily_analyze", params={"date": "2025-03-01"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "disk I/O error"}
    repo.create_action_item.assert_not_called()


def test_daily_analyze_falls_back_when_llm_fails(config, repo, limitless_client):
    mistral = MagicMock()
    mistral.chat.side_effect = requests.exceptions.HTTPError("502 Bad Gateway")
    client = create_test_client(
        config, repo, limitless_client, summarizer=DailySummarizer(mistral_client=mistral)
    )

    resp = client.get("/daily_analyze", params={"date": "2025-03-01"})

    assert resp.status_code == 200
    assert resp.json()["summary"] == "Summary of 1 entries: Planning"


def test_limitless_ingest_proxies_body(config, repo, limitless_client):
    payload = {"data": {"lifelogs": [{"id": "x", "title": "Walk"}]}, "meta": {"count": 1}}
    limitless_client.fetch.return_value = LifelogPage(status_code=200, payload=payload)
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/limitless_ingest")

    assert resp.status_code == 200
    assert resp.json() == payload
    limitless_client.fetch.assert_called_once_with(None, None)


def test_limitless_ingest_errors(config, repo, limitless_client):
    client = create_test_client(config, repo, limitless_client)

    limitless_client.fetch.side_effect = LimitlessAPIError(429, "Too Many Requests", "text/plain")
    resp = client.get("/limitless_ingest", params={"date": "2025-03-01"})
    assert resp.status_code == 429
    assert resp.text == "Too Many Requests"

    limitless_client.fetch.side_effect = requests.exceptions.ConnectionError("refused")
    resp = client.get("/limitless_ingest", params={"date": "2025-03-01"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "refused"}


def test_summary_not_found(config, repo, limitless_client):
    client = create_test_client(config, repo, limitless_client)

    resp = client.get("/summaries/2030-01-01")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Summary not found"}


def test_create_app_routes_use_given_config(tmp_path):
    """create_app(config) の設定がルート側の依存オブジェクトにも反映される"""
    config = Config(
        limitless=LimitlessConfig(api_key="app-key", default_timezone="Asia/Tokyo"),
        database=DatabaseConfig(path=str(tmp_path / "mine.db"), todo_column="Backlog"),
        log_file="",
    )
    repo = DigestRepository(db_path=config.database.path)
    repo.ensure_columns(["Backlog"])
    client = TestClient(create_app(config))

    upstream = MagicMock(status_code=200, ok=True, headers={})
    upstream.json.return_value = {
        "data": {"lifelogs": [{"title": "Planning", "markdown": "TODO: call Bob"}]}
    }
    with patch("src.limitless_client.client.requests.get", return_value=upstream) as mock_get:
        resp = client.get("/daily_analyze", params={"date": "2025-03-01"})

    assert resp.status_code == 200
    assert mock_get.call_args.kwargs["headers"] == {"X-API-Key": "app-key"}
    assert mock_get.call_args.kwargs["params"]["timezone"] == "Asia/Tokyo"

    stored = repo.get_summary("2025-03-01")
    assert stored is not None
    assert stored.summary == "Summary of 1 entries: Planning"
    assert [item.title for item in repo.list_action_items("2025-03-01")] == ["call Bob"]
    assert len(repo.list_kanban_items(repo.find_column_id("Backlog"))) == 1
