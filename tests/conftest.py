"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from credbridge.config.settings import Settings
from credbridge.providers.static import StaticTokenProvider
from credbridge.web.app import create_app

REMOTE_TOKENS_PATH = "/remote/tokens"
ISSUED_AT = 1_700_000_000


class FakeClock:
    """Monotonic clock stand-in that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def tokens_dir(tmp_path: Path) -> Path:
    """Bridge-side tokens directory; deliberately not created up front."""
    return tmp_path / "tokens"


@pytest.fixture()
def settings(tokens_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        use_file_challenge_auth=True,
        local_tokens_path=str(tokens_dir),
        remote_tokens_path=REMOTE_TOKENS_PATH,
        challenge_timeout_seconds=10,
        token_provider="static",
        static_token="settings-token",
    )


@pytest.fixture()
def provider() -> StaticTokenProvider:
    return StaticTokenProvider("test-access-token", lifetime_seconds=3600, clock=lambda: ISSUED_AT)


@pytest.fixture()
def app(settings, provider, clock):
    """Create a fresh app instance for tests."""
    return create_app(settings, provider=provider, clock=clock)


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
