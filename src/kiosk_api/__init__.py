"""kiosk_api: auction kiosk API client library."""

from .bidder import BidderLookupOutcome, classify_bidder_lookup, find_bidder_registration
from .config import ApiSection, KioskConfig, LogSection, TokenStoreSection, load
from .connectivity import ConnectivityGate
from .endpoints import (
    ApiKeys,
    AuthenticatedEndpoint,
    Endpoint,
    EndpointDescriptor,
    GuestEndpoint,
    HttpMethod,
    full_url,
)
from .exceptions import (
    ConfigError,
    ConfigErrorCodes,
    HttpStatusError,
    JsonParseFailed,
    KioskApiError,
    KioskApiErrorCodes,
    TokenRefreshFailed,
    TransportFailure,
)
from .interceptors import (
    Interceptor,
    NetworkLogger,
    RequestMetrics,
    authenticated_interceptors,
    default_interceptors,
)
from .logger import configure_logging, new_logger
from .models import ApiResponse, AppToken, RequestResult, parse_expiry
from .networking import (
    AuthorizedNetworking,
    Networking,
    networking_from_config,
    new_authorized_networking,
    new_authorized_stubbing_networking,
    new_default_networking,
    new_stubbing_networking,
)
from .provider import OnlineProvider, classify_response
from .resolver import (
    BidDetails,
    NewUser,
    authorized_networking_for,
    resolve_session,
    session_from_credentials,
    session_from_paddle_and_pin,
)
from .sessions import AccessTokenSession, GuestSession, PaddlePinSession, Session, UserSession
from .token_cache import TokenCache
from .token_store import InMemoryTokenStore, JsonFileTokenStore, TokenStore
from .transport import HttpxTransport, Transport

__all__ = [
    "ApiSection",
    "KioskConfig",
    "LogSection",
    "TokenStoreSection",
    "load",
    "new_logger",
    "configure_logging",
    "KioskApiError",
    "KioskApiErrorCodes",
    "HttpStatusError",
    "TransportFailure",
    "TokenRefreshFailed",
    "JsonParseFailed",
    "ConfigError",
    "ConfigErrorCodes",
    "HttpMethod",
    "EndpointDescriptor",
    "ApiKeys",
    "Endpoint",
    "GuestEndpoint",
    "AuthenticatedEndpoint",
    "full_url",
    "AppToken",
    "ApiResponse",
    "RequestResult",
    "parse_expiry",
    "TokenCache",
    "TokenStore",
    "InMemoryTokenStore",
    "JsonFileTokenStore",
    "ConnectivityGate",
    "Transport",
    "HttpxTransport",
    "Interceptor",
    "NetworkLogger",
    "RequestMetrics",
    "default_interceptors",
    "authenticated_interceptors",
    "OnlineProvider",
    "classify_response",
    "Networking",
    "AuthorizedNetworking",
    "new_default_networking",
    "new_authorized_networking",
    "new_stubbing_networking",
    "new_authorized_stubbing_networking",
    "networking_from_config",
    "Session",
    "GuestSession",
    "UserSession",
    "AccessTokenSession",
    "PaddlePinSession",
    "session_from_paddle_and_pin",
    "session_from_credentials",
    "resolve_session",
    "BidDetails",
    "authorized_networking_for",
    "NewUser",
    "BidderLookupOutcome",
    "classify_bidder_lookup",
    "find_bidder_registration",
]
