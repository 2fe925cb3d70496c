"""
Mistral APIクライアントモジュール

関連クラス:
  - config.MistralConfig: API設定を提供
  - journal.summarizer.DailySummarizer: このクライアントを使用

注意: 呼び出しは1回のみ（リトライなし）。失敗は例外で通知する。
"""

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from .config import MistralConfig
from .exceptions import MistralAPIError


class MistralClient:
    """Mistral chat completions クライアント"""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.mistral.ai/v1/chat/completions",
        model: str = "mistral-small-latest",
        temperature: float = 0.2,
        timeout: Optional[float] = None,
    ):
        """
        初期化

        Args:
            api_key: Bearer認証用のAPIキー
            api_url: chat completions エンドポイント
            model: 使用するモデル名
            temperature: 生成温度
            timeout: HTTPタイムアウト秒（Noneは無制限）
        """
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: MistralConfig) -> Optional["MistralClient"]:
        """Client for ``config``, or None when no API key is configured."""
        if not config.enabled:
            return None
        return cls(
            api_key=config.api_key,
            api_url=config.api_url,
            model=config.model,
            temperature=config.temperature,
            timeout=config.timeout_seconds,
        )

    def chat(self, messages: List[Dict[str, str]], return_json: bool = True) -> str:
        """
        チャット形式で会話

        Args:
            messages: メッセージのリスト [{"role": "user", "content": "..."}]
            return_json: JSONオブジェクト形式の応答を要求するか

        Returns:
            ``choices[0].message.content`` のテキスト

        Raises:
            MistralAPIError: 2xx以外、または応答形式が不正
            requests.exceptions.RequestException: 通信エラー
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if return_json:
            payload["response_format"] = {"type": "json_object"}

        response = requests.post(
            self.api_url,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            json=payload,
            timeout=self.timeout,
        )
        if not response.ok:
            self.logger.error(f"Mistral API error {response.status_code}: {response.text[:200]}")
            raise MistralAPIError(
                f"Mistral API returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            self.logger.error(f"Unexpected Mistral response: {e}")
            raise MistralAPIError(f"Unexpected Mistral response: {e}", response.status_code) from e

        if not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False)
        return content.strip()
