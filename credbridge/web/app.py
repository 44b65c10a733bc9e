"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Depends, FastAPI

from credbridge import __version__
from credbridge.auth.challenge import ChallengeIssuer, delete_best_effort
from credbridge.auth.gate import AuthGate
from credbridge.auth.secret_cache import SecretCache
from credbridge.bridge import TokenBridge
from credbridge.config.logging import setup_logging
from credbridge.config.settings import Settings, get_settings
from credbridge.models.api import HealthResponse
from credbridge.providers.factory import create_token_provider
from credbridge.web.dependencies import get_bridge, get_secret_cache
from credbridge.web.health import check_health
from credbridge.web.middleware import RequestIDMiddleware
from credbridge.web.routes.tokens import router as tokens_router
from credbridge.web.sweeper import ChallengeSweeper

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from credbridge.providers.base import TokenProviderBase

logger = structlog.get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    provider: TokenProviderBase | None = None,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    setup_logging(log_level=settings.log_level, json_output=not settings.debug)

    if provider is None:
        provider = create_token_provider(
            settings.token_provider,
            static_token=settings.static_token,
            static_token_lifetime_seconds=settings.static_token_lifetime_seconds,
            azure_credential_options=settings.azure_credential_options,
        )

    cache = SecretCache(on_evict=delete_best_effort, **({"clock": clock} if clock else {}))
    issuer = ChallengeIssuer(cache, remote_dir=settings.remote_tokens_path)
    gate = AuthGate(
        issuer,
        cache,
        enabled=settings.use_file_challenge_auth,
        local_dir=settings.local_tokens_dir,
        ttl_seconds=settings.challenge_timeout_seconds,
    )
    bridge = TokenBridge(gate, provider)
    sweeper = ChallengeSweeper(cache, interval=settings.sweep_interval_seconds)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()

    app = FastAPI(
        title="Local Credential Bridge",
        description="Instance-metadata style token endpoint backed by host credentials",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.secret_cache = cache
    app.state.bridge = bridge
    app.state.sweeper = sweeper

    app.add_middleware(RequestIDMiddleware)

    app.include_router(tokens_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check(
        bridge: TokenBridge = Depends(get_bridge),
        cache: SecretCache = Depends(get_secret_cache),
    ) -> HealthResponse:
        return check_health(bridge, cache)

    logger.info(
        "app_created",
        file_challenge_auth=settings.use_file_challenge_auth,
        local_tokens_dir=str(settings.local_tokens_dir),
        remote_tokens_path=settings.remote_tokens_path,
        token_provider=str(settings.token_provider),
    )
    return app
