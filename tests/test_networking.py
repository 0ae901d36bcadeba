"""Networking（トークン自動取得・ファクトリ）のユニットテスト"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest
import respx
from kiosk_api.config import ApiSection, KioskConfig, TokenStoreSection
from kiosk_api.connectivity import ConnectivityGate
from kiosk_api.endpoints import Me, Ping, SystemTime, XApp
from kiosk_api.exceptions import TokenRefreshFailed
from kiosk_api.models import AppToken
from kiosk_api.networking import (
    networking_from_config,
    new_authorized_networking,
    new_authorized_stubbing_networking,
    new_default_networking,
    new_stubbing_networking,
)
from kiosk_api.sessions import AccessTokenSession
from kiosk_api.token_store import InMemoryTokenStore, JsonFileTokenStore

BASE_URL = "https://api.artsy.net"
API = ApiSection(key="client-key", secret="client-secret")
XAPP_URL = f"{BASE_URL}/api/v1/xapp_token"
TIME_URL = f"{BASE_URL}/api/v1/system/time"

FRESH_TOKEN = {"xapp_token": "fresh-token", "expires_in": "2099-01-01T00:00:00Z"}


def seeded_store() -> InMemoryTokenStore:
    return InMemoryTokenStore(AppToken("cached-token", datetime(2099, 1, 1, tzinfo=timezone.utc)))


@respx.mock
async def test_token_is_fetched_once_then_reused() -> None:
    """無効なキャッシュなら 1 回だけ XApp を取得し、以後は再利用すること。"""
    xapp = respx.get(XAPP_URL).mock(return_value=httpx.Response(200, json=FRESH_TOKEN))
    target = respx.get(TIME_URL).mock(return_value=httpx.Response(200, json={"time": "now"}))
    store = InMemoryTokenStore()
    networking = new_default_networking(API, online=ConnectivityGate.always_online(), token_store=store)

    await networking.request(SystemTime())
    await networking.request(SystemTime())

    assert xapp.call_count == 1
    assert xapp.calls.last.request.url.params["client_id"] == "client-key"
    assert target.call_count == 2
    assert target.calls.last.request.headers["X-Xapp-Token"] == "fresh-token"
    assert store.save_count == 1


@respx.mock(assert_all_called=False)
async def test_valid_cached_token_skips_refresh(respx_mock: respx.MockRouter) -> None:
    xapp = respx_mock.get(XAPP_URL).mock(return_value=httpx.Response(200, json=FRESH_TOKEN))
    target = respx_mock.get(TIME_URL).mock(return_value=httpx.Response(200, json={}))
    networking = new_default_networking(API, online=ConnectivityGate.always_online(), token_store=seeded_store())

    await networking.request(SystemTime())

    assert xapp.call_count == 0
    assert target.calls.last.request.headers["X-Xapp-Token"] == "cached-token"


@respx.mock(assert_all_called=False)
async def test_refresh_http_error_aborts_request(respx_mock: respx.MockRouter) -> None:
    """XApp 取得の失敗は TokenRefreshFailed になり、本来の操作は送出しないこと。"""
    respx_mock.get(XAPP_URL).mock(return_value=httpx.Response(500, text="oops"))
    target = respx_mock.get(TIME_URL).mock(return_value=httpx.Response(200, json={}))
    networking = new_default_networking(API, online=ConnectivityGate.always_online(), token_store=InMemoryTokenStore())

    with pytest.raises(TokenRefreshFailed) as exc_info:
        await networking.request(SystemTime())

    assert exc_info.value.code == "TOKEN_REFRESH_FAILED"
    assert target.call_count == 0
    assert networking.token_cache.get() is None


@pytest.mark.parametrize(
    "payload",
    [
        {"expires_in": "2099-01-01T00:00:00Z"},
        {"xapp_token": "fresh-token"},
        {"xapp_token": "fresh-token", "expires_in": "tomorrow"},
    ],
)
@respx.mock(assert_all_called=False)
async def test_refresh_with_invalid_payload_aborts_request(payload: dict[str, str], respx_mock: respx.MockRouter) -> None:
    respx_mock.get(XAPP_URL).mock(return_value=httpx.Response(200, json=payload))
    target = respx_mock.get(TIME_URL).mock(return_value=httpx.Response(200, json={}))
    networking = new_default_networking(API, online=ConnectivityGate.always_online(), token_store=InMemoryTokenStore())

    with pytest.raises(TokenRefreshFailed):
        await networking.request(SystemTime())
    assert target.call_count == 0


@respx.mock
async def test_token_issuance_does_not_trigger_refresh() -> None:
    xapp = respx.get(XAPP_URL).mock(return_value=httpx.Response(200, json=FRESH_TOKEN))
    networking = new_default_networking(API, online=ConnectivityGate.always_online(), token_store=InMemoryTokenStore())

    response = await networking.request(XApp(networking.api_keys))

    assert response.json() == FRESH_TOKEN
    assert xapp.call_count == 1
    # 直接呼んだ XApp の結果はキャッシュされない
    assert networking.token_cache.get() is None


@respx.mock
async def test_waits_for_connectivity_before_token_check() -> None:
    """オフライン中はトークン取得も含めて何も送出しないこと。"""
    xapp = respx.get(XAPP_URL).mock(return_value=httpx.Response(200, json=FRESH_TOKEN))
    target = respx.get(TIME_URL).mock(return_value=httpx.Response(200, json={}))
    gate = ConnectivityGate(online=False)
    networking = new_default_networking(API, online=gate, token_store=InMemoryTokenStore())

    task = asyncio.create_task(networking.request(SystemTime()))
    await asyncio.sleep(0.01)
    assert xapp.call_count == 0
    assert target.call_count == 0

    gate.set(True)
    await asyncio.wait_for(task, timeout=1)
    assert xapp.call_count == 1
    assert target.call_count == 1


@respx.mock
async def test_refreshed_token_is_persisted(tmp_path: Path) -> None:
    respx.get(XAPP_URL).mock(return_value=httpx.Response(200, json=FRESH_TOKEN))
    respx.get(TIME_URL).mock(return_value=httpx.Response(200, json={}))
    path = tmp_path / "xapp.json"
    networking = new_default_networking(
        API,
        online=ConnectivityGate.always_online(),
        token_store=JsonFileTokenStore(path),
    )

    await networking.request(SystemTime())

    assert JsonFileTokenStore(path).load() == AppToken("fresh-token", datetime(2099, 1, 1, tzinfo=timezone.utc))


@respx.mock
async def test_authorized_networking_sends_access_token() -> None:
    route = respx.get(f"{BASE_URL}/api/v1/me").mock(return_value=httpx.Response(200, json={"id": "u-1"}))
    networking = new_authorized_networking(API, "user-token", online=ConnectivityGate.always_online())

    response = await networking.request(Me())

    request = route.calls.last.request
    assert request.headers["X-Access-Token"] == "user-token"
    assert "X-Xapp-Token" not in request.headers
    assert response.json() == {"id": "u-1"}


def test_authorized_shares_transport_and_gate() -> None:
    gate = ConnectivityGate()
    networking = new_default_networking(API, online=gate, token_store=InMemoryTokenStore())
    authorized = networking.authorized(AccessTokenSession("user-token"))

    assert authorized.provider.transport is networking.provider.transport
    assert authorized.provider.online is gate
    assert authorized.provider.base_url == BASE_URL
    assert authorized.session == AccessTokenSession("user-token")


async def test_stubbing_networking_returns_samples() -> None:
    networking = new_stubbing_networking()

    response = await networking.request(Ping())

    assert response.json() == {"ping": "pong"}
    assert networking.token_cache.valid_token() == "stubbed-xapp-token"


async def test_authorized_stubbing_networking_returns_samples() -> None:
    networking = new_authorized_stubbing_networking()
    response = await networking.request(Me())
    assert response.json()["id"] == "sample-user"


def test_networking_from_config_stub_mode() -> None:
    config = KioskConfig(api=ApiSection(stub_responses=True))
    networking = networking_from_config(config)
    assert networking.provider.stub_responses
    assert networking.provider.online.is_online


def test_networking_from_config_uses_staging_and_file_store(tmp_path: Path) -> None:
    path = tmp_path / "xapp.json"
    JsonFileTokenStore(path).save(AppToken("persisted", datetime(2099, 1, 1, tzinfo=timezone.utc)))
    config = KioskConfig(
        api=ApiSection(use_staging=True),
        token_store=TokenStoreSection(path=str(path)),
    )

    networking = networking_from_config(config)

    assert networking.provider.base_url == "https://stagingapi.artsy.net"
    assert not networking.provider.stub_responses
    assert networking.token_cache.valid_token() == "persisted"


@respx.mock(assert_all_called=False)
async def test_store_failure_is_token_refresh_failure(tmp_path: Path, respx_mock: respx.MockRouter) -> None:
    """トークンの保存に失敗したら TokenRefreshFailed になり、本来の操作は送出しないこと。"""
    respx_mock.get(XAPP_URL).mock(return_value=httpx.Response(200, json=FRESH_TOKEN))
    target = respx_mock.get(TIME_URL).mock(return_value=httpx.Response(200, json={}))
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    networking = new_default_networking(
        API,
        online=ConnectivityGate.always_online(),
        token_store=JsonFileTokenStore(blocker / "xapp.json"),
    )

    with pytest.raises(TokenRefreshFailed) as exc_info:
        await networking.request(SystemTime())

    assert isinstance(exc_info.value.__cause__, OSError)
    assert target.call_count == 0
    assert networking.token_cache.get() is None
