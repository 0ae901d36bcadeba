"""リクエスト/レスポンスを観測するインターセプター"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Callable

import httpx
import structlog

from . import metrics
from .endpoints import Endpoint, MyBidPosition, Ping
from .exceptions import HttpStatusError, KioskApiError
from .models import ApiResponse, RequestResult

EndpointPredicate = Callable[[Endpoint], bool]


def _never(endpoint: Endpoint) -> bool:
    return False


# XApp/XAuth は GET のため資格情報がクエリに載る
_SECRET_QUERY = re.compile(r"(?<=[?&])(client_secret|password|auction_pin|email)=[^&#\s]*")


def redact(text: str) -> str:
    """URL やエラーメッセージ中の資格情報クエリを伏せ字にする。"""
    return _SECRET_QUERY.sub(r"\1=[FILTERED]", text)


class Interceptor(ABC):
    """送信前とレスポンス受信後に呼ばれる観測者。

    リクエストや結果を書き換えることはできない。
    """

    @abstractmethod
    def before_send(self, request: httpx.Request, endpoint: Endpoint) -> None:
        ...

    @abstractmethod
    def after_receive(self, result: RequestResult, endpoint: Endpoint) -> None:
        ...


class NetworkLogger(Interceptor):
    """通信内容をログ出力する。

    deny に一致する操作は送信ログと成功ログを出さない。allow に一致する
    操作の成功レスポンスは本文まで出し、それ以外はステータスと URL のみ。
    失敗はフィルタに関係なく常に出力する。
    """

    def __init__(
        self,
        *,
        allow: EndpointPredicate = _never,
        deny: EndpointPredicate = _never,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._allow = allow
        self._deny = deny
        self._logger = logger or structlog.stdlib.get_logger(__name__)

    def before_send(self, request: httpx.Request, endpoint: Endpoint) -> None:
        if self._deny(endpoint):
            return
        self._logger.info(
            "sending request",
            endpoint=endpoint.tag,
            method=request.method,
            url=redact(str(request.url)),
        )

    def after_receive(self, result: RequestResult, endpoint: Endpoint) -> None:
        if isinstance(result, ApiResponse):
            if self._deny(endpoint):
                return
            if self._allow(endpoint):
                self._logger.info(
                    "received response",
                    endpoint=endpoint.tag,
                    status=result.status_code,
                    url=redact(result.url),
                    body=result.text,
                )
            else:
                self._logger.info(
                    "received response",
                    endpoint=endpoint.tag,
                    status=result.status_code,
                    url=redact(result.url),
                )
            return

        self._logger.error(
            "received networking error",
            endpoint=endpoint.tag,
            code=result.code,
            status=result.status_code if isinstance(result, HttpStatusError) else None,
            error=redact(str(result)),
        )


class RequestMetrics(Interceptor):
    """OpenTelemetry カウンターにリクエスト結果を記録する。"""

    def before_send(self, request: httpx.Request, endpoint: Endpoint) -> None:
        return None

    def after_receive(self, result: RequestResult, endpoint: Endpoint) -> None:
        if isinstance(result, KioskApiError):
            status = result.status_code if isinstance(result, HttpStatusError) else 0
            metrics.request_errors_total.add(1, {"endpoint": endpoint.tag, "code": result.code})
        else:
            status = result.status_code
        metrics.request_total.add(1, {"endpoint": endpoint.tag, "status": status})


def default_interceptors() -> tuple[Interceptor, ...]:
    """ゲスト用の既定インターセプター。ヘルスチェックはログに出さない。"""
    return (
        NetworkLogger(deny=lambda endpoint: isinstance(endpoint, Ping)),
        RequestMetrics(),
    )


def authenticated_interceptors() -> tuple[Interceptor, ...]:
    """認証済み用の既定インターセプター。入札状況の本文はログに残す。"""
    return (
        NetworkLogger(allow=lambda endpoint: isinstance(endpoint, MyBidPosition)),
        RequestMetrics(),
    )
