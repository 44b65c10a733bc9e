"""Health check endpoint logic."""

from __future__ import annotations

from typing import TYPE_CHECKING

from credbridge import __version__
from credbridge.models.api import HealthResponse

if TYPE_CHECKING:
    from credbridge.auth.secret_cache import SecretCache
    from credbridge.bridge import TokenBridge


def check_health(bridge: TokenBridge, cache: SecretCache) -> HealthResponse:
    """Return bridge status with the number of outstanding challenges."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        file_challenge_auth=bridge.gate.enabled,
        pending_challenges=len(cache),
    )
