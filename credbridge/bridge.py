"""Token bridge: validates the request, runs the gate, calls the provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from credbridge.exceptions import TokenProviderError
from credbridge.models.api import TokenResponse
from credbridge.types import AuthStatus, OutcomeKind

if TYPE_CHECKING:
    from credbridge.auth.gate import AuthGate
    from credbridge.providers.base import TokenProviderBase

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BridgeOutcome:
    """Result of one token request. Exactly one payload field is set per kind."""

    kind: OutcomeKind
    token: TokenResponse | None = None
    challenge_path: str | None = None
    detail: str = ""


class TokenBridge:
    """Orchestrates the auth gate and the token provider for a single request."""

    def __init__(self, gate: AuthGate, provider: TokenProviderBase) -> None:
        self._gate = gate
        self._provider = provider

    @property
    def gate(self) -> AuthGate:
        return self._gate

    async def handle(self, resource: str | None, authorization: str | None) -> BridgeOutcome:
        if resource is None or not resource.strip():
            logger.info("token_request_invalid", reason="missing_resource")
            return BridgeOutcome(OutcomeKind.INVALID_REQUEST, detail="resource is required")

        decision = await self._gate.authenticate(authorization)
        if decision.status == AuthStatus.CHALLENGE:
            return BridgeOutcome(OutcomeKind.CHALLENGE, challenge_path=decision.challenge_path)
        if decision.status == AuthStatus.REJECTED:
            return BridgeOutcome(OutcomeKind.UNAUTHORIZED, detail="Unauthorized")
        if decision.status == AuthStatus.FAILED:
            return BridgeOutcome(OutcomeKind.INTERNAL_ERROR, detail="Cannot issue challenge")

        try:
            access = await self._provider.get_token(resource)
        except TokenProviderError as exc:
            logger.error("token_provider_failed", resource=resource, error=str(exc))
            return BridgeOutcome(OutcomeKind.PROVIDER_ERROR, detail="Token provider failed")

        logger.info("token_issued", resource=resource, expires_on=access.expires_on)
        return BridgeOutcome(
            OutcomeKind.TOKEN,
            token=TokenResponse(
                access_token=access.token,
                expires_on=access.expires_on,
                resource=resource,
            ),
        )
