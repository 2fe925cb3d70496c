"""
設定管理モジュール

Settings come from config/app_config.yaml, with secrets and deployment
specific values overlaid from the environment.

関連クラス:
  - analyzer.DailyAnalyzer: この設定を使用するメインクラス
  - limitless_client.LimitlessClient / mistral_client.MistralClient
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config" / "app_config.yaml"
DEFAULT_TIMEZONE = "America/Montreal"


@dataclass
class LimitlessConfig:
    """Limitless lifelogs API設定"""

    api_url: str = "https://api.limitless.ai/v1/lifelogs"
    api_key: str = ""
    default_timezone: str = DEFAULT_TIMEZONE
    limit: int = 10
    timeout_seconds: Optional[float] = None


@dataclass
class MistralConfig:
    """Mistral chat completions設定（api_keyが空なら無効）"""

    api_url: str = "https://api.mistral.ai/v1/chat/completions"
    api_key: str = ""
    model: str = "mistral-small-latest"
    temperature: float = 0.2
    max_input_chars: int = 8000
    timeout_seconds: Optional[float] = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@dataclass
class DatabaseConfig:
    """SQLite datastore設定"""

    path: str = str(PROJECT_ROOT / "data" / "lifelog_digest.db")
    todo_column: str = "Todo"


@dataclass
class Config:
    """アプリケーション設定クラス"""

    limitless: LimitlessConfig = field(default_factory=LimitlessConfig)
    mistral: MistralConfig = field(default_factory=MistralConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/lifelog_digest.log"

    summary_max_chars: int = 1000

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時は LIFELOG_DIGEST_CONFIG か
                config/app_config.yaml）

        Returns:
            Config: 設定インスタンス
        """
        if config_path is None:
            config_path = Path(os.getenv("LIFELOG_DIGEST_CONFIG") or DEFAULT_CONFIG_PATH)

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        limitless_data = yaml_data.get("limitless", {})
        mistral_data = yaml_data.get("mistral", {})
        database_data = yaml_data.get("database", {})
        log_data = yaml_data.get("log", {})
        summary_data = yaml_data.get("summary", {})

        defaults = cls()
        return cls(
            limitless=LimitlessConfig(
                api_url=limitless_data.get("api_url", defaults.limitless.api_url),
                api_key=limitless_data.get("api_key", ""),
                default_timezone=limitless_data.get("default_timezone", DEFAULT_TIMEZONE),
                limit=int(limitless_data.get("limit", defaults.limitless.limit)),
                timeout_seconds=limitless_data.get("timeout_seconds"),
            ),
            mistral=MistralConfig(
                api_url=mistral_data.get("api_url", defaults.mistral.api_url),
                api_key=mistral_data.get("api_key", ""),
                model=mistral_data.get("model", defaults.mistral.model),
                temperature=float(mistral_data.get("temperature", defaults.mistral.temperature)),
                max_input_chars=int(
                    mistral_data.get("max_input_chars", defaults.mistral.max_input_chars)
                ),
                timeout_seconds=mistral_data.get("timeout_seconds"),
            ),
            database=DatabaseConfig(
                path=_resolve_path(database_data.get("path"), defaults.database.path),
                todo_column=database_data.get("todo_column", defaults.database.todo_column),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", defaults.log_file) or "",
            summary_max_chars=int(summary_data.get("max_chars", defaults.summary_max_chars)),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数のみから設定を読み込む"""
        return cls().with_env_overrides()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """YAML（存在すれば）を読み込み、環境変数で上書きする"""
        path = config_path or Path(os.getenv("LIFELOG_DIGEST_CONFIG") or DEFAULT_CONFIG_PATH)
        config = cls.from_yaml(path) if Path(path).exists() else cls()
        return config.with_env_overrides()

    def with_env_overrides(self) -> "Config":
        """Overlay secrets and deployment values from the environment in place."""
        self.limitless.api_key = os.getenv("LIMITLESS_API_KEY", self.limitless.api_key)
        self.mistral.api_key = os.getenv("MISTRAL_API_KEY", self.mistral.api_key)
        db_path = os.getenv("LIFELOG_DIGEST_DB_PATH")
        if db_path:
            self.database.path = db_path
        self.log_level = os.getenv("LOG_LEVEL", self.log_level)
        self.log_file = os.getenv("LOG_FILE", self.log_file)
        return self


def _resolve_path(value: Optional[str], default: str) -> str:
    if not value:
        return default
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return str(path)
