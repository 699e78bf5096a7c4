#  Weather Proxy - FastAPI Application
#
#  Main app setup: lifespan, exception handlers, request IDs, CORS,
#  router includes and the optional static frontend.
#  Creates the DI container and manages the shared HTTP client lifecycle.
#
#  Depends on: config.py, container.py, rate_limit.py, routes/*.py
#  Used by:    run.py

import logging
import uuid
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from weather_proxy.config import CORS_ORIGINS, PUBLIC_DIR, validate_config
from weather_proxy.container import Container
from weather_proxy.exceptions import UpstreamUnavailableError
from weather_proxy.logging_config import set_request_id
from weather_proxy.models.schemas import ErrorOut, UpstreamErrorOut
from weather_proxy.rate_limit import limiter
from weather_proxy.routes.health import router as health_router
from weather_proxy.routes.proxy import router as proxy_router

logger = logging.getLogger("weather_proxy.app")

# Create and wire the DI container
container = Container()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle.

    Fails fast on missing upstream configuration before accepting traffic.
    """
    validate_config()

    settings = container.settings()
    http_client = container.http_client()
    logger.info("Weather proxy starting (environment=%s)", settings.environment)

    async with AsyncExitStack() as stack:
        stack.push_async_callback(http_client.aclose)
        yield

    logger.info("Weather proxy shutting down")


app = FastAPI(
    title="Weather Proxy",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    response = JSONResponse(
        status_code=429,
        content=ErrorOut(detail="Rate limit exceeded. Try again later.").model_dump(),
    )
    # Adds X-RateLimit-* and Retry-After for the limit that was hit
    return limiter._inject_headers(response, getattr(request.state, "view_rate_limit", None))


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
    return JSONResponse(
        status_code=500,
        content=UpstreamErrorOut(detail="Upstream request failed", error=exc.error_type).model_dump(),
    )


@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Request ID tracing
class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = uuid.uuid4().hex[:12]
        set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            set_request_id(None)

app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
    expose_headers=[
        "X-Request-ID",
        "X-RateLimit-Limit",
        "X-RateLimit-Remaining",
        "X-RateLimit-Reset",
        "Retry-After",
    ],
)

app.include_router(health_router, prefix="/api")
app.include_router(proxy_router, prefix="/api")

# Serve the browser frontend if present
if PUBLIC_DIR.exists():
    app.mount("/", StaticFiles(directory=str(PUBLIC_DIR), html=True), name="frontend")
