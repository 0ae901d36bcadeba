"""kiosk_api ライブラリの例外型定義"""

from __future__ import annotations


class KioskApiError(Exception):
    """kiosk_api ライブラリのエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class KioskApiErrorCodes:
    """KioskApiError のエラーコード定数。"""

    HTTP_STATUS: str = "HTTP_STATUS_ERROR"
    TRANSPORT: str = "TRANSPORT_ERROR"
    TOKEN_REFRESH_FAILED: str = "TOKEN_REFRESH_FAILED"
    JSON_PARSE_FAILED: str = "JSON_PARSE_FAILED"


class HttpStatusError(KioskApiError):
    """ステータスコード 400 以上のレスポンス。"""

    def __init__(self, status_code: int, body: bytes, url: str) -> None:
        super().__init__(
            code=KioskApiErrorCodes.HTTP_STATUS,
            message=f"HTTP {status_code} from {url}",
        )
        self.status_code = status_code
        self.body = body
        self.url = url


class TransportFailure(KioskApiError):
    """ソケット・TLS・リダイレクト等のトランスポート層エラー。

    url は失敗したリクエストの URL（リダイレクト追従後は最後のリクエスト）。
    """

    def __init__(self, url: str, cause: Exception | None = None) -> None:
        super().__init__(
            code=KioskApiErrorCodes.TRANSPORT,
            message=f"Transport failed for {url}: {cause}",
            cause=cause,
        )
        self.url = url


class TokenRefreshFailed(KioskApiError):
    """XApp トークンの再取得に失敗した。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(
            code=KioskApiErrorCodes.TOKEN_REFRESH_FAILED,
            message=message,
            cause=cause,
        )


class JsonParseFailed(KioskApiError):
    """レスポンス JSON に期待するフィールドが無い。"""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(
            code=KioskApiErrorCodes.JSON_PARSE_FAILED,
            message=message,
            cause=cause,
        )


class ConfigError(Exception):
    """設定読み込みのエラー。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class ConfigErrorCodes:
    """ConfigError のエラーコード定数。"""

    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"
