#  Weather Proxy - Dependency Injection Container
#
#  DeclarativeContainer wiring the forwarding pipeline and its dependencies.
#  Replaces module-level singletons with injectable providers.
#
#  Depends on: config.py, services/*
#  Used by:    app.py, routes/*

import httpx
from dependency_injector import containers, providers

from weather_proxy.config import load_settings
from weather_proxy.services.forwarder import UpstreamForwarder
from weather_proxy.services.response_cache import ResponseCache


class Container(containers.DeclarativeContainer):
    """DI container for the Weather Proxy.

    All services are Singletons: one instance per application lifecycle.
    Routes access them via @inject + Depends(Provide[Container.xxx]).
    Tests override them via container.xxx.override(providers.Object(mock)).
    """

    wiring_config = containers.WiringConfiguration(
        modules=[
            "weather_proxy.routes.proxy",
        ]
    )

    # --- Core ---
    settings = providers.Singleton(load_settings)
    http_client = providers.Singleton(
        httpx.AsyncClient,
        timeout=settings.provided.upstream_timeout,
    )

    # --- Pipeline ---
    response_cache = providers.Singleton(ResponseCache, settings=settings)
    forwarder = providers.Singleton(
        UpstreamForwarder,
        settings=settings,
        http_client=http_client,
    )
