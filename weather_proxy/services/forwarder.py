#  Weather Proxy - Upstream Forwarder
#
#  Builds the outbound request (client query + injected API key), performs
#  the single upstream GET, and hands back the reply body for relaying.
#  One request in, one outbound call, one reply. No retries.
#
#  Depends on: config.py, exceptions.py
#  Used by:    container.py, routes/proxy.py

import logging
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from weather_proxy.config import ProxySettings
from weather_proxy.exceptions import UpstreamUnavailableError

logger = logging.getLogger("weather_proxy.forwarder")


@dataclass
class UpstreamReply:
    body: bytes
    upstream_status: int
    media_type: str = "application/json"


class UpstreamForwarder:
    """Forwards client queries to the upstream API with the credential attached."""

    def __init__(self, settings: ProxySettings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._http = http_client

    def build_params(self, client_params: Mapping[str, str]) -> dict[str, str]:
        """Credential first, then every client parameter.

        A client parameter carrying the credential's name is dropped, so the
        server-side key always wins.
        """
        key_name = self._settings.key_name
        params = {key_name: self._settings.key_value}
        for name, value in client_params.items():
            if name == key_name:
                continue
            params[name] = value
        return params

    def build_url(self, client_params: Mapping[str, str]) -> httpx.URL:
        base = httpx.URL(self._settings.upstream_base_url)
        return base.copy_merge_params(self.build_params(client_params))

    async def forward(self, client_params: Mapping[str, str]) -> UpstreamReply:
        """Call the upstream once.

        Any HTTP status from the upstream is a successful relay; only
        transport failures raise UpstreamUnavailableError.
        """
        url = self.build_url(client_params)
        if not self._settings.is_production:
            logger.info("Upstream request: %s", url)

        try:
            resp = await self._http.get(url)
        except httpx.RequestError as e:
            logger.warning("Upstream request failed: %s", type(e).__name__)
            raise UpstreamUnavailableError(e) from e

        if resp.status_code >= 400:
            logger.info("Upstream replied %d, relaying body as-is", resp.status_code)

        return UpstreamReply(
            body=resp.content,
            upstream_status=resp.status_code,
            media_type=resp.headers.get("content-type", "application/json"),
        )
