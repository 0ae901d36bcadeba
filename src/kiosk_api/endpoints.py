"""API エンドポイントカタログ

ゲスト用 (GuestEndpoint) とユーザー認証用 (AuthenticatedEndpoint) の
2 つの閉じた操作集合を定義する。各操作はペイロードを持つ frozen dataclass で、
path は抽象プロパティのため定義漏れの操作はインスタンス化できない。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class HttpMethod(StrEnum):
    """HTTP メソッド。"""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    HEAD = "HEAD"


@dataclass(frozen=True)
class EndpointDescriptor:
    """操作から導出されるリクエスト記述子。"""

    tag: str
    path: str
    method: HttpMethod
    parameters: dict[str, Any] | None
    requires_app_token: bool


@dataclass(frozen=True)
class ApiKeys:
    """クライアント ID / シークレット。"""

    key: str = ""
    secret: str = ""


class Endpoint(ABC):
    """全操作の基底クラス。"""

    method: HttpMethod = HttpMethod.GET
    requires_app_token: bool = True
    sample: str | None = None

    @property
    @abstractmethod
    def path(self) -> str:
        """オリジンからの相対パス。"""
        ...

    def parameters(self) -> dict[str, Any] | None:
        return None

    @property
    def tag(self) -> str:
        return type(self).__name__

    def descriptor(self) -> EndpointDescriptor:
        return EndpointDescriptor(
            tag=self.tag,
            path=self.path,
            method=self.method,
            parameters=self.parameters(),
            requires_app_token=self.requires_app_token,
        )


class GuestEndpoint(Endpoint):
    """ユーザーセッション不要の操作（XApp トークンで認可）。"""


class AuthenticatedEndpoint(Endpoint):
    """ユーザーセッションが必要な操作。"""

    requires_app_token = False


def full_url(endpoint: Endpoint, base_url: str) -> str:
    """オリジンとパスを連結した URL を返す。"""
    return base_url.rstrip("/") + endpoint.path


def encode_parameters(parameters: Mapping[str, Any] | None) -> dict[str, str]:
    """パラメータをフォーム/クエリ用にフラット化する。

    ネストした辞書は ``outer[inner]`` キーになり、真偽値は "true"/"false"。
    """
    encoded: dict[str, str] = {}
    for key, value in (parameters or {}).items():
        _flatten(encoded, key, value)
    return encoded


def _flatten(out: dict[str, str], key: str, value: Any) -> None:
    if isinstance(value, Mapping):
        for inner_key, inner_value in value.items():
            _flatten(out, f"{key}[{inner_key}]", inner_value)
    elif isinstance(value, bool):
        out[key] = "true" if value else "false"
    else:
        out[key] = str(value)


# --- ゲスト操作 ---


@dataclass(frozen=True)
class XApp(GuestEndpoint):
    keys: ApiKeys

    requires_app_token = False
    sample = "XApp"

    @property
    def path(self) -> str:
        return "/api/v1/xapp_token"

    def parameters(self) -> dict[str, Any] | None:
        return {"client_id": self.keys.key, "client_secret": self.keys.secret}


@dataclass(frozen=True)
class XAuth(GuestEndpoint):
    keys: ApiKeys
    email: str
    password: str

    requires_app_token = False
    sample = "XAuth"

    @property
    def path(self) -> str:
        return "/oauth2/access_token"

    def parameters(self) -> dict[str, Any] | None:
        return {
            "client_id": self.keys.key,
            "client_secret": self.keys.secret,
            "email": self.email,
            "password": self.password,
            "grant_type": "credentials",
        }


@dataclass(frozen=True)
class TrustToken(GuestEndpoint):
    number: str
    auction_pin: str

    sample = "XAuth"

    @property
    def path(self) -> str:
        return "/api/v1/me/trust_token"

    def parameters(self) -> dict[str, Any] | None:
        return {"number": self.number, "auction_pin": self.auction_pin}


@dataclass(frozen=True)
class SystemTime(GuestEndpoint):
    sample = "SystemTime"

    @property
    def path(self) -> str:
        return "/api/v1/system/time"


@dataclass(frozen=True)
class Ping(GuestEndpoint):
    sample = "Ping"

    @property
    def path(self) -> str:
        return "/api/v1/system/ping"


@dataclass(frozen=True)
class Artwork(GuestEndpoint):
    id: str

    sample = "Artwork"

    @property
    def path(self) -> str:
        return f"/api/v1/artwork/{self.id}"


@dataclass(frozen=True)
class Artist(GuestEndpoint):
    id: str

    sample = "Artist"

    @property
    def path(self) -> str:
        return f"/api/v1/artist/{self.id}"


@dataclass(frozen=True)
class Auctions(GuestEndpoint):
    sample = "Auctions"

    @property
    def path(self) -> str:
        return "/api/v1/sales"

    def parameters(self) -> dict[str, Any] | None:
        return {"is_auction": "true"}


@dataclass(frozen=True)
class AuctionListings(GuestEndpoint):
    id: str
    page: int
    page_size: int

    sample = "AuctionListings"

    @property
    def path(self) -> str:
        return f"/api/v1/sale/{self.id}/sale_artworks"

    def parameters(self) -> dict[str, Any] | None:
        return {"size": self.page_size, "page": self.page}


@dataclass(frozen=True)
class AuctionInfo(GuestEndpoint):
    auction_id: str

    sample = "AuctionInfo"

    @property
    def path(self) -> str:
        return f"/api/v1/sale/{self.auction_id}"


@dataclass(frozen=True)
class AuctionInfoForArtwork(GuestEndpoint):
    auction_id: str
    artwork_id: str

    sample = "AuctionInfoForArtwork"

    @property
    def path(self) -> str:
        return f"/api/v1/sale/{self.auction_id}/sale_artwork/{self.artwork_id}"


@dataclass(frozen=True)
class FindBidderRegistration(GuestEndpoint):
    auction_id: str
    phone: str

    # 実 API は 302 を返すためサンプルは形式上のもの
    sample = "Me"

    @property
    def path(self) -> str:
        return "/api/v1/bidder"

    def parameters(self) -> dict[str, Any] | None:
        return {"sale_id": self.auction_id, "number": self.phone}


@dataclass(frozen=True)
class ActiveAuctions(GuestEndpoint):
    sample = "ActiveAuctions"

    @property
    def path(self) -> str:
        return "/api/v1/sales"

    def parameters(self) -> dict[str, Any] | None:
        return {"is_auction": True, "live": True}


@dataclass(frozen=True)
class CreateUser(GuestEndpoint):
    email: str
    password: str
    phone: str
    post_code: str
    name: str

    method = HttpMethod.POST
    sample = "Me"

    @property
    def path(self) -> str:
        return "/api/v1/user"

    def parameters(self) -> dict[str, Any] | None:
        return {
            "email": self.email,
            "password": self.password,
            "phone": self.phone,
            "name": self.name,
            "location": {"postal_code": self.post_code},
        }


@dataclass(frozen=True)
class BidderDetailsNotification(GuestEndpoint):
    auction_id: str
    identifier: str

    method = HttpMethod.PUT
    sample = "RegisterToBid"

    @property
    def path(self) -> str:
        return "/api/v1/bidder/bidding_details_notification"

    def parameters(self) -> dict[str, Any] | None:
        return {"sale_id": self.auction_id, "identifier": self.identifier}


@dataclass(frozen=True)
class LostPasswordNotification(GuestEndpoint):
    email: str

    method = HttpMethod.POST
    sample = "ForgotPassword"

    @property
    def path(self) -> str:
        return "/api/v1/users/send_reset_password_instructions"

    def parameters(self) -> dict[str, Any] | None:
        return {"email": self.email}


@dataclass(frozen=True)
class FindExistingEmailRegistration(GuestEndpoint):
    email: str

    method = HttpMethod.HEAD
    sample = "ForgotPassword"

    @property
    def path(self) -> str:
        return "/api/v1/user"

    def parameters(self) -> dict[str, Any] | None:
        return {"email": self.email}


# --- 認証済み操作 ---


@dataclass(frozen=True)
class MyCreditCards(AuthenticatedEndpoint):
    sample = "MyCreditCards"

    @property
    def path(self) -> str:
        return "/api/v1/me/credit_cards"


@dataclass(frozen=True)
class CreatePINForBidder(AuthenticatedEndpoint):
    bidder_id: str

    method = HttpMethod.POST
    sample = "CreatePINForBidder"

    @property
    def path(self) -> str:
        return f"/api/v1/bidder/{self.bidder_id}/pin"


@dataclass(frozen=True)
class RegisterToBid(AuthenticatedEndpoint):
    auction_id: str

    method = HttpMethod.POST
    sample = "RegisterToBid"

    @property
    def path(self) -> str:
        return "/api/v1/bidder"

    def parameters(self) -> dict[str, Any] | None:
        return {"sale_id": self.auction_id}


@dataclass(frozen=True)
class MyBiddersForAuction(AuthenticatedEndpoint):
    auction_id: str

    sample = "MyBiddersForAuction"

    @property
    def path(self) -> str:
        return "/api/v1/me/bidders"

    def parameters(self) -> dict[str, Any] | None:
        return {"sale_id": self.auction_id}


@dataclass(frozen=True)
class MyBidPositionsForAuctionArtwork(AuthenticatedEndpoint):
    auction_id: str
    artwork_id: str

    sample = "MyBidPositionsForAuctionArtwork"

    @property
    def path(self) -> str:
        return "/api/v1/me/bidder_positions"

    def parameters(self) -> dict[str, Any] | None:
        return {"sale_id": self.auction_id, "artwork_id": self.artwork_id}


@dataclass(frozen=True)
class MyBidPosition(AuthenticatedEndpoint):
    id: str

    sample = "MyBidPosition"

    @property
    def path(self) -> str:
        return f"/api/v1/me/bidder_position/{self.id}"


@dataclass(frozen=True)
class PlaceABid(AuthenticatedEndpoint):
    auction_id: str
    artwork_id: str
    max_bid_cents: str

    method = HttpMethod.POST
    sample = "CreateABid"

    @property
    def path(self) -> str:
        return "/api/v1/me/bidder_position"

    def parameters(self) -> dict[str, Any] | None:
        return {
            "sale_id": self.auction_id,
            "artwork_id": self.artwork_id,
            "max_bid_amount_cents": self.max_bid_cents,
        }


@dataclass(frozen=True)
class UpdateMe(AuthenticatedEndpoint):
    email: str
    phone: str
    post_code: str
    name: str

    method = HttpMethod.PUT
    sample = "Me"

    @property
    def path(self) -> str:
        return "/api/v1/me"

    def parameters(self) -> dict[str, Any] | None:
        return {
            "email": self.email,
            "phone": self.phone,
            "name": self.name,
            "location": {"postal_code": self.post_code},
        }


@dataclass(frozen=True)
class RegisterCard(AuthenticatedEndpoint):
    stripe_token: str
    swiped: bool

    method = HttpMethod.POST
    sample = "RegisterCard"

    @property
    def path(self) -> str:
        return "/api/v1/me/credit_cards"

    def parameters(self) -> dict[str, Any] | None:
        return {
            "provider": "stripe",
            "token": self.stripe_token,
            "created_by_trusted_client": self.swiped,
        }


@dataclass(frozen=True)
class Me(AuthenticatedEndpoint):
    sample = "Me"

    @property
    def path(self) -> str:
        return "/api/v1/me"


GUEST_ENDPOINTS: tuple[type[GuestEndpoint], ...] = (
    XApp,
    XAuth,
    TrustToken,
    SystemTime,
    Ping,
    Artwork,
    Artist,
    Auctions,
    AuctionListings,
    AuctionInfo,
    AuctionInfoForArtwork,
    FindBidderRegistration,
    ActiveAuctions,
    CreateUser,
    BidderDetailsNotification,
    LostPasswordNotification,
    FindExistingEmailRegistration,
)

AUTHENTICATED_ENDPOINTS: tuple[type[AuthenticatedEndpoint], ...] = (
    MyCreditCards,
    CreatePINForBidder,
    RegisterToBid,
    MyBiddersForAuction,
    MyBidPositionsForAuctionArtwork,
    MyBidPosition,
    PlaceABid,
    UpdateMe,
    RegisterCard,
    Me,
)
