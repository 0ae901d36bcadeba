"""オンライン時のみリクエストを送出するプロバイダー"""

from __future__ import annotations

from collections.abc import Iterable

import httpx
import structlog

from .connectivity import ConnectivityGate
from .endpoints import Endpoint, HttpMethod, encode_parameters, full_url
from .exceptions import HttpStatusError, KioskApiError, TransportFailure
from .interceptors import Interceptor
from .models import ApiResponse, RequestResult
from .samples import sample_response
from .sessions import Session
from .transport import Transport

logger = structlog.stdlib.get_logger(__name__)

_QUERY_METHODS = frozenset({HttpMethod.GET, HttpMethod.HEAD})


def classify_response(response: httpx.Response, request_url: str) -> RequestResult:
    """ステータス 200〜399 を成功、400 以上を HttpStatusError に分類する。"""
    if 200 <= response.status_code < 400:
        return ApiResponse.from_httpx(response, request_url)
    return HttpStatusError(
        status_code=response.status_code,
        body=response.content,
        url=str(response.url),
    )


def _failed_url(error: httpx.HTTPError, default: str) -> str:
    try:
        return str(error.request.url)
    except RuntimeError:
        # request が紐付いていない例外
        return default


class OnlineProvider:
    """1 回の呼び出しにつき 1 回だけリクエストを送出するプロバイダー。

    接続待ち → リクエスト構築 → before インターセプター → トランスポート
    → 分類 → after インターセプター の順に処理する。
    """

    def __init__(
        self,
        *,
        base_url: str,
        session: Session,
        transport: Transport,
        online: ConnectivityGate,
        interceptors: Iterable[Interceptor] = (),
        stub_responses: bool = False,
    ) -> None:
        self._base_url = base_url
        self._session = session
        self._transport = transport
        self._online = online
        self._interceptors: tuple[Interceptor, ...] = tuple(interceptors)
        self._stub_responses = stub_responses

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def session(self) -> Session:
        return self._session

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def online(self) -> ConnectivityGate:
        return self._online

    @property
    def interceptors(self) -> tuple[Interceptor, ...]:
        return self._interceptors

    @property
    def stub_responses(self) -> bool:
        return self._stub_responses

    def build_request(self, endpoint: Endpoint) -> httpx.Request:
        descriptor = endpoint.descriptor()
        params = encode_parameters(descriptor.parameters)
        headers = self._session.headers(descriptor)
        url = full_url(endpoint, self._base_url)
        if descriptor.method in _QUERY_METHODS:
            return httpx.Request(descriptor.method.value, url, params=params, headers=headers)
        return httpx.Request(descriptor.method.value, url, data=params, headers=headers)

    async def request(self, endpoint: Endpoint) -> ApiResponse:
        """オンラインになるまで待ってから endpoint を実行する。

        Raises:
            HttpStatusError: ステータス 400 以上
            TransportFailure: トランスポート層のエラー
        """
        await self._online.wait_until_online()
        return await self._dispatch(endpoint)

    async def _dispatch(self, endpoint: Endpoint) -> ApiResponse:
        request = self.build_request(endpoint)
        request_url = str(request.url)
        for interceptor in self._interceptors:
            try:
                interceptor.before_send(request, endpoint)
            except Exception:
                logger.exception("interceptor failed", endpoint=endpoint.tag, interceptor=type(interceptor).__name__)

        result: RequestResult
        try:
            if self._stub_responses:
                response = sample_response(endpoint, request)
            else:
                response = await self._transport.execute(request)
        except httpx.HTTPError as e:
            result = TransportFailure(url=_failed_url(e, request_url), cause=e)
        else:
            result = classify_response(response, request_url)

        for interceptor in self._interceptors:
            try:
                interceptor.after_receive(result, endpoint)
            except Exception:
                logger.exception("interceptor failed", endpoint=endpoint.tag, interceptor=type(interceptor).__name__)

        if isinstance(result, KioskApiError):
            raise result
        return result

