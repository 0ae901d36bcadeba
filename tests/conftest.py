"""テスト共通設定"""

from collections.abc import Iterator

import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """new_logger による structlog のグローバル設定をテスト間で持ち越さない。"""
    yield
    structlog.reset_defaults()
