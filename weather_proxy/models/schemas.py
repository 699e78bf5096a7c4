#  Weather Proxy - Pydantic Schemas
#
#  Response models for the proxy's own (non-relayed) payloads.
#
#  Depends on: (none)
#  Used by:    app.py, routes/*

from pydantic import BaseModel


class HealthOut(BaseModel):
    status: str = "ok"


class ErrorOut(BaseModel):
    detail: str


class UpstreamErrorOut(ErrorOut):
    error: str
