"""Fixed-token provider for local development and tests."""

import time
from collections.abc import Callable

from credbridge.providers.base import AccessToken, TokenProviderBase


class StaticTokenProvider(TokenProviderBase):
    def __init__(
        self,
        token: str,
        lifetime_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ):
        self._token = token
        self._lifetime = lifetime_seconds
        self._clock = clock

    async def get_token(self, resource: str) -> AccessToken:
        return AccessToken(token=self._token, expires_on=int(self._clock()) + self._lifetime)
