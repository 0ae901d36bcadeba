"""XApp トークンキャッシュ"""

from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Callable

from .models import AppToken
from .token_store import TokenStore


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenCache:
    """XApp トークンを保持するセル。

    スナップショット (AppToken) 単位で差し替えるため、読み手が
    トークンと期限の食い違った状態を観測することはない。
    """

    def __init__(
        self,
        store: TokenStore | None = None,
        *,
        now_fn: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._now_fn = now_fn
        self._lock = Lock()
        self._state = AppToken()
        if store is not None:
            self._state = store.load() or AppToken()

    def current(self) -> AppToken:
        return self._state

    def get(self) -> str | None:
        return self._state.token

    def is_valid(self) -> bool:
        return self._state.is_valid(self._now_fn())

    def valid_token(self) -> str | None:
        """有効なトークンがあれば返す。無ければ None。"""
        state = self._state
        if state.is_valid(self._now_fn()):
            return state.token
        return None

    def set(self, token: str | None, expiry: datetime | None) -> None:
        """トークンと期限をまとめて上書きし、ストアに保存する。"""
        self.replace(AppToken(token=token, expiry=expiry))

    def replace(self, state: AppToken) -> None:
        """スナップショットを差し替える。ストアへの保存に失敗した場合は差し替えない。

        Raises:
            OSError: ストアへの保存に失敗した場合
        """
        with self._lock:
            if self._store is not None:
                self._store.save(state)
            self._state = state
