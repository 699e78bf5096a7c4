#  Weather Proxy - Health Route
#
#  Liveness probe. Never rate limited, cached, or forwarded.
#
#  Depends on: models/schemas.py
#  Used by:    app.py

from fastapi import APIRouter

from weather_proxy.models.schemas import HealthOut

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> HealthOut:
    return HealthOut()
