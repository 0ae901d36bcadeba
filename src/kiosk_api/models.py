"""kiosk_api データモデル"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

from .exceptions import KioskApiError


def parse_expiry(value: str) -> datetime:
    """ISO-8601 の絶対時刻を UTC aware な datetime に変換する。

    Raises:
        ValueError: 形式が不正な場合
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class AppToken:
    """XApp トークンとその有効期限。"""

    token: str | None = None
    expiry: datetime | None = None

    def is_valid(self, now: datetime) -> bool:
        """トークンがあり、有効期限が now より後なら True。"""
        return bool(self.token) and self.expiry is not None and self.expiry > now

    @classmethod
    def from_response(cls, response: Any) -> AppToken:
        """``{"xapp_token": ..., "expires_in": ISO-8601}`` から生成する。

        Raises:
            ValueError: フィールドの欠落、型・形式が不正な場合
        """
        if not isinstance(response, dict):
            raise ValueError("XApp token response must be a JSON object")
        token = response.get("xapp_token")
        expires_in = response.get("expires_in")
        if not isinstance(token, str) or not isinstance(expires_in, str):
            raise ValueError("xapp_token and expires_in must be strings")
        return cls(token=token, expiry=parse_expiry(expires_in))


@dataclass(frozen=True)
class ApiResponse:
    """成功 (ステータス 200〜399) と分類されたレスポンス。"""

    status_code: int
    url: str
    request_url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """本文を JSON としてデコードする。

        Raises:
            ValueError: JSON として不正な場合
        """
        return json.loads(self.content)

    @classmethod
    def from_httpx(cls, response: httpx.Response, request_url: str) -> ApiResponse:
        return cls(
            status_code=response.status_code,
            url=str(response.url),
            request_url=request_url,
            headers=dict(response.headers),
            content=response.content,
        )


# after_receive に渡される分類済み結果
RequestResult = ApiResponse | KioskApiError
