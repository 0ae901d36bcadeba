"""キオスク API クライアント設定（pydantic BaseModel + YAML）"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError, ConfigErrorCodes

PRODUCTION_URL = "https://api.artsy.net"
STAGING_URL = "https://stagingapi.artsy.net"


class ApiSection(BaseModel):
    """API 接続設定。"""

    key: str = ""
    secret: str = ""
    use_staging: bool = False
    stub_responses: bool = False
    timeout_seconds: float = Field(default=10.0, gt=0)
    production_url: str = PRODUCTION_URL
    staging_url: str = STAGING_URL

    @property
    def base_url(self) -> str:
        """use_staging に応じた接続先オリジン。"""
        return self.staging_url if self.use_staging else self.production_url


class LogSection(BaseModel):
    """ログ設定。"""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class TokenStoreSection(BaseModel):
    """XApp トークン永続化設定。path が空ならメモリのみ。"""

    path: str = ""


class KioskConfig(BaseModel):
    """クライアント設定全体。起動時に一度だけ組み立てて注入する。"""

    api: ApiSection = Field(default_factory=ApiSection)
    log: LogSection = Field(default_factory=LogSection)
    token_store: TokenStoreSection = Field(default_factory=TokenStoreSection)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """override を優先して base にディープマージした新しい辞書を返す。"""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=ConfigErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Config root must be a mapping: {path}",
        )
    return data


def load(base_path: Path, env_path: Path | None = None) -> KioskConfig:
    """設定ファイルを読み込んで KioskConfig を返す。

    base_path: ベース設定ファイルパス（必須）
    env_path: 環境別設定ファイルパス（オプション）。存在する場合はベースにマージ。
    """
    data = _read_yaml(base_path)
    if env_path is not None and env_path.exists():
        data = deep_merge(data, _read_yaml(env_path))
    try:
        return KioskConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=ConfigErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
