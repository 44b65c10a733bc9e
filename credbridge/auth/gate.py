"""File challenge authentication gate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from credbridge.exceptions import ChallengeIssueError
from credbridge.types import AuthStatus

if TYPE_CHECKING:
    import pathlib

    from credbridge.auth.challenge import ChallengeIssuer
    from credbridge.auth.secret_cache import SecretCache

logger = structlog.get_logger(__name__)

PRESENTATION_SCHEME = "basic"


@dataclass(frozen=True)
class AuthDecision:
    status: AuthStatus
    challenge_path: str | None = None


def parse_presented_secret(authorization: str) -> str | None:
    """Extract the secret from a ``Basic <secret>`` header value.

    The secret is taken verbatim; it is not a ``user:password`` pair.
    """
    parts = authorization.strip().split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != PRESENTATION_SCHEME:
        return None
    secret = parts[1].strip()
    return secret or None


class AuthGate:
    """Decides per request whether to issue a challenge or accept a presented secret.

    Holds no per-request state; all state lives in the ``SecretCache``.
    """

    def __init__(
        self,
        issuer: ChallengeIssuer,
        cache: SecretCache,
        *,
        enabled: bool,
        local_dir: pathlib.Path,
        ttl_seconds: float,
    ) -> None:
        self._issuer = issuer
        self._cache = cache
        self._enabled = enabled
        self._local_dir = local_dir
        self._ttl_seconds = ttl_seconds

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def authenticate(self, authorization: str | None) -> AuthDecision:
        if not self._enabled:
            return AuthDecision(AuthStatus.GRANTED)

        if authorization is None or not authorization.strip():
            try:
                issued = await self._issuer.issue(self._local_dir, self._ttl_seconds)
            except ChallengeIssueError:
                logger.exception("challenge_issue_failed", local_dir=str(self._local_dir))
                return AuthDecision(AuthStatus.FAILED)
            return AuthDecision(AuthStatus.CHALLENGE, challenge_path=issued.remote_path)

        secret = parse_presented_secret(authorization)
        if secret is None or self._cache.take(secret) is None:
            # Unknown, consumed, expired and malformed all look the same to the caller.
            logger.warning("challenge_rejected")
            return AuthDecision(AuthStatus.REJECTED)

        logger.info("challenge_accepted")
        return AuthDecision(AuthStatus.GRANTED)
