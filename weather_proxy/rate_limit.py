#  Weather Proxy - Rate Limiter
#
#  Shared limiter instance used by app.py and route decorators.
#  Clients are keyed by network address, walking back through the
#  X-Forwarded-For chain only as far as the configured trusted proxy hops.
#
#  Depends on: config.py
#  Used by:    app.py, routes/proxy.py

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from weather_proxy import config


def resolve_client_address(request: Request, trusted_hops: int) -> str:
    """Return the client address as seen through `trusted_hops` reverse proxies.

    The socket peer is hop 0. Each trusted hop steps one entry further left
    in X-Forwarded-For; the walk stops at the left-most entry.
    """
    peer = get_remote_address(request)
    if trusted_hops <= 0:
        return peer

    header = request.headers.get("X-Forwarded-For", "")
    forwarded = [addr.strip() for addr in header.split(",") if addr.strip()]
    chain = [peer] + forwarded[::-1]
    return chain[min(trusted_hops, len(chain) - 1)]


def client_identity(request: Request) -> str:
    return resolve_client_address(request, config.TRUSTED_PROXY_HOPS)


def rate_limit_value() -> str:
    """Current limit string, e.g. "100 per 10 minutes" (evaluated per request)."""
    return config.RATE_LIMIT


limiter = Limiter(key_func=client_identity, headers_enabled=True)
