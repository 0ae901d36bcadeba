"""認証済みセッションの解決

パドル番号（または電話番号）+ PIN があれば静的ヘッダのセッションを、
無ければメール/パスワードをアクセストークンに交換したセッションを作る。
どちらを使うかは入力で一度だけ決まり、片方の失敗で他方に切り替えることはない。
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from .endpoints import XAuth
from .exceptions import JsonParseFailed
from .networking import AuthorizedNetworking, Networking
from .sessions import AccessTokenSession, PaddlePinSession, UserSession

logger = structlog.stdlib.get_logger(__name__)


def session_from_paddle_and_pin(number: str, pin: str, auction_id: str) -> PaddlePinSession:
    """パドル番号と PIN からセッションを作る。通信は発生しない。"""
    return PaddlePinSession(number=number, pin=pin, auction_id=auction_id)


async def session_from_credentials(
    networking: Networking,
    email: str,
    password: str,
) -> AccessTokenSession:
    """メール/パスワードをアクセストークンに交換してセッションを作る。

    Raises:
        JsonParseFailed: レスポンスに access_token が無い場合
        HttpStatusError: 交換リクエストがステータス 400 以上の場合
        TransportFailure: トランスポート層のエラー
    """
    response = await networking.request(XAuth(networking.api_keys, email=email, password=password))
    try:
        payload = response.json()
    except ValueError as e:
        raise JsonParseFailed("Access token response is not valid JSON", cause=e) from e

    access_token = payload.get("access_token") if isinstance(payload, dict) else None
    if not isinstance(access_token, str):
        logger.error("getting access token failed", status=response.status_code)
        raise JsonParseFailed("Access token response has no access_token")
    return AccessTokenSession(access_token)


async def resolve_session(
    networking: Networking,
    *,
    auction_id: str,
    number: str | None = None,
    pin: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> UserSession:
    """入力に応じてどちらか一方の方法でセッションを作る。"""
    if number is not None and pin is not None:
        return session_from_paddle_and_pin(number, pin, auction_id)
    return await session_from_credentials(networking, email or "", password or "")


@dataclass
class NewUser:
    """新規登録中のユーザー情報。"""

    email: str | None = None
    password: str | None = None
    phone_number: str | None = None
    zip_code: str | None = None
    name: str | None = None


@dataclass
class BidDetails:
    """入札フローの状態。"""

    auction_id: str
    paddle_number: str | None = None
    bidder_pin: str | None = None
    bid_amount_cents: int | None = None
    bidder_id: str | None = None
    new_user: NewUser = field(default_factory=NewUser)

    async def authenticated_networking(self, networking: Networking) -> AuthorizedNetworking:
        """パドル番号+PIN、またはメール/パスワードから認証済みネットワーキングを作る。"""
        session = await resolve_session(
            networking,
            auction_id=self.auction_id,
            number=self.paddle_number,
            pin=self.bidder_pin,
            email=self.new_user.email,
            password=self.new_user.password,
        )
        return networking.authorized(session)


async def authorized_networking_for(networking: Networking, bid_details: BidDetails) -> AuthorizedNetworking:
    return await bid_details.authenticated_networking(networking)
