"""リクエストに認可ヘッダを付与するセッション"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .endpoints import EndpointDescriptor
from .token_cache import TokenCache

XAPP_TOKEN_HEADER = "X-Xapp-Token"
ACCESS_TOKEN_HEADER = "X-Access-Token"


class Session(ABC):
    """認可ヘッダの供給元。"""

    @abstractmethod
    def headers(self, descriptor: EndpointDescriptor) -> dict[str, str]:
        """descriptor のリクエストに付与するヘッダを返す。"""
        ...


class GuestSession(Session):
    """XApp トークンで認可するゲストセッション。"""

    def __init__(self, token_cache: TokenCache) -> None:
        self._token_cache = token_cache

    @property
    def token_cache(self) -> TokenCache:
        return self._token_cache

    def headers(self, descriptor: EndpointDescriptor) -> dict[str, str]:
        if not descriptor.requires_app_token:
            return {}
        return {XAPP_TOKEN_HEADER: self._token_cache.get() or ""}


class UserSession(Session):
    """ユーザー認証済みセッション。"""


@dataclass(frozen=True)
class AccessTokenSession(UserSession):
    """メール/パスワードの交換で得たアクセストークンを送る。"""

    access_token: str

    def headers(self, descriptor: EndpointDescriptor) -> dict[str, str]:
        return {ACCESS_TOKEN_HEADER: self.access_token}


@dataclass(frozen=True)
class PaddlePinSession(UserSession):
    """パドル番号（または電話番号）と PIN を静的ヘッダで送る。"""

    number: str
    pin: str
    auction_id: str

    def headers(self, descriptor: EndpointDescriptor) -> dict[str, str]:
        return {"pin": self.pin, "number": self.number, "sale_id": self.auction_id}
