"""ゲスト用・認証済み用のネットワーキング"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import httpx
import structlog

from .config import ApiSection, KioskConfig
from .connectivity import ConnectivityGate
from .endpoints import ApiKeys, AuthenticatedEndpoint, GuestEndpoint, XApp
from .exceptions import KioskApiError, TokenRefreshFailed
from .interceptors import Interceptor, authenticated_interceptors, default_interceptors, redact
from .models import ApiResponse, AppToken
from .provider import OnlineProvider
from .sessions import AccessTokenSession, GuestSession, UserSession
from .token_cache import TokenCache
from .token_store import InMemoryTokenStore, JsonFileTokenStore, TokenStore
from .transport import HttpxTransport, Transport

logger = structlog.stdlib.get_logger(__name__)


class Networking:
    """ゲストスコープのネットワーキング。

    XApp トークンが必要な操作の前に、キャッシュが無効なら
    トークンを取得し直してから送出する。
    """

    def __init__(
        self,
        provider: OnlineProvider,
        token_cache: TokenCache,
        api_keys: ApiKeys,
    ) -> None:
        self._provider = provider
        self._token_cache = token_cache
        self._api_keys = api_keys

    @property
    def provider(self) -> OnlineProvider:
        return self._provider

    @property
    def token_cache(self) -> TokenCache:
        return self._token_cache

    @property
    def api_keys(self) -> ApiKeys:
        return self._api_keys

    async def request(self, endpoint: GuestEndpoint) -> ApiResponse:
        """接続待ち → トークン確認 → 送出 の順で endpoint を実行する。

        Raises:
            TokenRefreshFailed: トークンの再取得に失敗した場合
            HttpStatusError: ステータス 400 以上
            TransportFailure: トランスポート層のエラー
        """
        await self._provider.online.wait_until_online()
        if endpoint.requires_app_token:
            await self.ensure_app_token()
        return await self._provider.request(endpoint)

    async def ensure_app_token(self) -> str:
        """有効な XApp トークンを返す。無効なら取得してキャッシュに保存する。"""
        cached = self._token_cache.valid_token()
        if cached is not None:
            return cached

        try:
            response = await self._provider.request(XApp(self._api_keys))
        except KioskApiError as e:
            raise TokenRefreshFailed(f"XApp token request failed: {redact(str(e))}", cause=e) from e
        try:
            token = AppToken.from_response(response.json())
        except ValueError as e:
            raise TokenRefreshFailed(f"Invalid XApp token response: {e}", cause=e) from e

        try:
            self._token_cache.replace(token)
        except OSError as e:
            raise TokenRefreshFailed(f"Failed to store XApp token: {e}", cause=e) from e
        logger.info("refreshed xapp token", expiry=token.expiry.isoformat() if token.expiry else None)
        return token.token or ""

    def authorized(
        self,
        session: UserSession,
        *,
        interceptors: Iterable[Interceptor] | None = None,
    ) -> AuthorizedNetworking:
        """このネットワーキングと同じトランスポート・接続ゲートを使う認証済み版を返す。"""
        provider = OnlineProvider(
            base_url=self._provider.base_url,
            session=session,
            transport=self._provider.transport,
            online=self._provider.online,
            interceptors=authenticated_interceptors() if interceptors is None else interceptors,
            stub_responses=self._provider.stub_responses,
        )
        return AuthorizedNetworking(provider, session)


class AuthorizedNetworking:
    """ユーザースコープのネットワーキング。"""

    def __init__(self, provider: OnlineProvider, session: UserSession) -> None:
        self._provider = provider
        self._session = session

    @property
    def provider(self) -> OnlineProvider:
        return self._provider

    @property
    def session(self) -> UserSession:
        return self._session

    async def request(self, endpoint: AuthenticatedEndpoint) -> ApiResponse:
        return await self._provider.request(endpoint)


def new_default_networking(
    api: ApiSection,
    *,
    online: ConnectivityGate,
    token_store: TokenStore | None = None,
    transport: Transport | None = None,
    interceptors: Iterable[Interceptor] | None = None,
) -> Networking:
    """ゲスト用ネットワーキングを組み立てる。"""
    token_cache = TokenCache(token_store)
    provider = OnlineProvider(
        base_url=api.base_url,
        session=GuestSession(token_cache),
        transport=transport or HttpxTransport(timeout_seconds=api.timeout_seconds),
        online=online,
        interceptors=default_interceptors() if interceptors is None else interceptors,
    )
    return Networking(provider, token_cache, ApiKeys(key=api.key, secret=api.secret))


def new_authorized_networking(
    api: ApiSection,
    access_token: str,
    *,
    online: ConnectivityGate,
    transport: Transport | None = None,
    interceptors: Iterable[Interceptor] | None = None,
) -> AuthorizedNetworking:
    """アクセストークンで認可する認証済みネットワーキングを組み立てる。"""
    session = AccessTokenSession(access_token)
    provider = OnlineProvider(
        base_url=api.base_url,
        session=session,
        transport=transport or HttpxTransport(timeout_seconds=api.timeout_seconds),
        online=online,
        interceptors=authenticated_interceptors() if interceptors is None else interceptors,
    )
    return AuthorizedNetworking(provider, session)


class _UnusedTransport(Transport):
    async def execute(self, request: httpx.Request) -> httpx.Response:
        raise RuntimeError("stubbing networking never reaches the transport")


def new_stubbing_networking(api: ApiSection | None = None) -> Networking:
    """同梱サンプルを返すスタブ用ネットワーキング。常にオンライン扱い。"""
    api = api or ApiSection()
    token_cache = TokenCache(InMemoryTokenStore())
    provider = OnlineProvider(
        base_url=api.base_url,
        session=GuestSession(token_cache),
        transport=_UnusedTransport(),
        online=ConnectivityGate.always_online(),
        stub_responses=True,
    )
    return Networking(provider, token_cache, ApiKeys(key=api.key, secret=api.secret))


def new_authorized_stubbing_networking(
    session: UserSession | None = None,
    api: ApiSection | None = None,
) -> AuthorizedNetworking:
    """同梱サンプルを返す認証済みスタブ用ネットワーキング。"""
    return new_stubbing_networking(api).authorized(
        session or AccessTokenSession("stubbed-access-token"),
        interceptors=(),
    )


def networking_from_config(
    config: KioskConfig,
    *,
    online: ConnectivityGate | None = None,
    transport: Transport | None = None,
) -> Networking:
    """設定からゲスト用ネットワーキングを組み立てる。

    api.stub_responses が真ならスタブ用（常にオンライン）を返す。
    token_store.path が空ならトークンはメモリのみに保持する。
    online を省略した場合は常にオンラインのゲートを使う。
    """
    if config.api.stub_responses:
        return new_stubbing_networking(config.api)

    store: TokenStore
    if config.token_store.path:
        store = JsonFileTokenStore(Path(config.token_store.path))
    else:
        store = InMemoryTokenStore()
    return new_default_networking(
        config.api,
        online=online or ConnectivityGate.always_online(),
        token_store=store,
        transport=transport,
    )
