"""XApp トークンの永続化ストア"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from .models import AppToken, parse_expiry

logger = structlog.stdlib.get_logger(__name__)


class TokenStore(ABC):
    """トークン永続化ストア抽象基底クラス。"""

    @abstractmethod
    def load(self) -> AppToken | None:
        """保存済みトークンを読み込む。無ければ None。"""
        ...

    @abstractmethod
    def save(self, token: AppToken) -> None:
        """トークンを保存する。"""
        ...


class InMemoryTokenStore(TokenStore):
    """テスト用インメモリストア。"""

    def __init__(self, initial: AppToken | None = None) -> None:
        self._token = initial
        self.save_count = 0

    def load(self) -> AppToken | None:
        return self._token

    def save(self, token: AppToken) -> None:
        self._token = token
        self.save_count += 1


class JsonFileTokenStore(TokenStore):
    """JSON ファイルに保存するストア（端末ローカルの永続化用）。"""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> AppToken | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            token = data.get("xapp_token")
            expiry = data.get("expiry")
            return AppToken(
                token=token if isinstance(token, str) else None,
                expiry=parse_expiry(expiry) if isinstance(expiry, str) else None,
            )
        except (OSError, ValueError, AttributeError) as e:
            logger.warning("ignoring unreadable token store", path=str(self._path), error=str(e))
            return None

    def save(self, token: AppToken) -> None:
        payload = {
            "xapp_token": token.token,
            "expiry": token.expiry.isoformat() if token.expiry is not None else None,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload), encoding="utf-8")
        tmp_path.replace(self._path)
