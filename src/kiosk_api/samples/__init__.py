"""スタブモード用のサンプルレスポンス"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources

import httpx

from ..endpoints import Endpoint


@lru_cache(maxsize=None)
def load_sample(name: str) -> bytes:
    """同梱のサンプル JSON (``<name>.json``) を読み込む。"""
    return resources.files(__package__).joinpath(f"{name}.json").read_bytes()


def sample_response(endpoint: Endpoint, request: httpx.Request) -> httpx.Response:
    """endpoint のサンプルを 200 レスポンスとして返す。"""
    content = load_sample(endpoint.sample) if endpoint.sample else b""
    return httpx.Response(
        200,
        content=content,
        headers={"Content-Type": "application/json"},
        request=request,
    )
