"""ネットワーク接続状態のゲート"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable
from threading import Lock
from typing import Callable

ConnectivityListener = Callable[[bool], None]


def _release(waiter: asyncio.Future[None]) -> None:
    if not waiter.done():
        waiter.set_result(None)


class ConnectivityGate:
    """オンライン状態を保持し、オンラインになるまでリクエストを待たせる。

    状態遷移は subscribe したリスナーに通知される。別スレッド
    （到達性監視など）からの set() も可。待機にタイムアウトは無い。
    """

    def __init__(self, online: bool = False) -> None:
        self._online = online
        self._lock = Lock()
        self._listeners: list[ConnectivityListener] = []
        self._waiters: list[tuple[asyncio.AbstractEventLoop, asyncio.Future[None]]] = []

    @classmethod
    def always_online(cls) -> ConnectivityGate:
        return cls(online=True)

    @property
    def is_online(self) -> bool:
        return self._online

    def subscribe(self, listener: ConnectivityListener) -> Callable[[], None]:
        """状態遷移のリスナーを登録し、解除用の関数を返す。"""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set(self, online: bool) -> None:
        """接続状態を更新する。True への遷移で待機中のリクエストを解放する。"""
        with self._lock:
            changed = online != self._online
            self._online = online
            waiters: list[tuple[asyncio.AbstractEventLoop, asyncio.Future[None]]] = []
            if online:
                waiters, self._waiters = self._waiters, []
            listeners = list(self._listeners) if changed else []

        for loop, waiter in waiters:
            if not loop.is_closed():
                loop.call_soon_threadsafe(_release, waiter)
        for listener in listeners:
            listener(online)

    async def wait_until_online(self) -> None:
        """False を読み飛ばし、最初の True で戻る。既にオンラインなら即座に戻る。"""
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._online:
                return
            waiter: asyncio.Future[None] = loop.create_future()
            entry = (loop, waiter)
            self._waiters.append(entry)
        try:
            await waiter
        finally:
            with self._lock:
                if entry in self._waiters:
                    self._waiters.remove(entry)

    async def bind(self, signal: AsyncIterable[bool]) -> None:
        """到達性監視のストリームをゲートに流し込む。ストリーム終了で戻る。"""
        async for online in signal:
            self.set(online)
