#  Weather Proxy - Proxy Route
#
#  GET /api: rate limit -> response cache -> upstream forwarder.
#  Relays the upstream body with status 200 whatever status the upstream
#  returned; transport failures surface as 500 via the app's exception handler.
#
#  Depends on: container.py, rate_limit.py, services/forwarder.py, services/response_cache.py
#  Used by:    app.py

from dependency_injector.wiring import inject, Provide
from fastapi import APIRouter, Depends, Request, Response

from weather_proxy.container import Container
from weather_proxy.rate_limit import limiter, rate_limit_value
from weather_proxy.services.forwarder import UpstreamForwarder
from weather_proxy.services.response_cache import CachedResponse, ResponseCache

router = APIRouter(tags=["proxy"])


def _relay(entry: CachedResponse, max_age: int) -> Response:
    return Response(
        content=entry.body,
        status_code=entry.status_code,
        media_type=entry.media_type,
        headers={"Cache-Control": f"max-age={max_age}"},
    )


@router.get("")
@limiter.limit(rate_limit_value)
@inject
async def proxy(
    request: Request,
    forwarder: UpstreamForwarder = Depends(Provide[Container.forwarder]),
    cache: ResponseCache = Depends(Provide[Container.response_cache]),
) -> Response:
    """Forward the query string to the upstream API with the API key attached."""
    key = cache.cache_key(request.url.path, request.url.query)

    if cache.enabled:
        entry = cache.get(key)
        if entry is not None:
            return _relay(entry, cache.remaining_ttl(entry))

    reply = await forwarder.forward(request.query_params)

    if not cache.enabled:
        return Response(content=reply.body, status_code=200, media_type=reply.media_type)

    entry = cache.set(key, reply.body, status_code=200, media_type=reply.media_type)
    return _relay(entry, cache.ttl)
