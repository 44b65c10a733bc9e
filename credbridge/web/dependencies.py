"""FastAPI dependency injection for the shared bridge components."""

from __future__ import annotations

from fastapi import Request

from credbridge.auth.secret_cache import SecretCache
from credbridge.bridge import TokenBridge


def get_bridge(request: Request) -> TokenBridge:
    return request.app.state.bridge


def get_secret_cache(request: Request) -> SecretCache:
    return request.app.state.secret_cache
