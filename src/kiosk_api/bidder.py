"""電話番号/パドル番号から入札者登録の有無を調べる"""

from __future__ import annotations

from enum import StrEnum

from .endpoints import FindBidderRegistration
from .exceptions import HttpStatusError, TransportFailure
from .networking import Networking

# 登録済みの場合、API は /api/v1/bidder/<id> へリダイレクトする
BIDDER_PATH_MARKER = "v1/bidder/"


class BidderLookupOutcome(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"


def classify_bidder_lookup(failure: HttpStatusError | TransportFailure) -> BidderLookupOutcome:
    """失敗したリクエストの URL から入札者の有無を判定する。

    リダイレクト先 URL を見るヒューリスティックであり、プロトコル上の
    保証ではない。リダイレクトの扱いが異なるトランスポートでは見直すこと。
    """
    if BIDDER_PATH_MARKER in failure.url:
        return BidderLookupOutcome.FOUND
    return BidderLookupOutcome.NOT_FOUND


async def find_bidder_registration(
    networking: Networking,
    auction_id: str,
    phone: str,
) -> BidderLookupOutcome:
    """auction_id のオークションに phone の入札者が登録済みか調べる。"""
    try:
        response = await networking.request(FindBidderRegistration(auction_id=auction_id, phone=phone))
    except (HttpStatusError, TransportFailure) as e:
        return classify_bidder_lookup(e)
    if BIDDER_PATH_MARKER in response.url:
        return BidderLookupOutcome.FOUND
    return BidderLookupOutcome.NOT_FOUND
