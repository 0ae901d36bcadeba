"""HTTP トランスポート"""

from __future__ import annotations

from abc import ABC, abstractmethod

import httpx


class Transport(ABC):
    """リクエストを実行するトランスポート抽象基底クラス。

    トランスポート層の失敗は httpx.HTTPError として送出する。
    """

    @abstractmethod
    async def execute(self, request: httpx.Request) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        return None


class HttpxTransport(Transport):
    """httpx.AsyncClient を使ったトランスポート。

    リダイレクトは追従し、Cookie はリクエスト間で保持しない。
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=timeout_seconds,
            follow_redirects=True,
        )

    async def execute(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._client.send(request)
        finally:
            self._client.cookies.clear()

    async def aclose(self) -> None:
        await self._client.aclose()
