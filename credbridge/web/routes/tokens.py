"""Instance-metadata style token route."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Query

from credbridge.bridge import TokenBridge
from credbridge.models.api import TokenResponse
from credbridge.types import OutcomeKind
from credbridge.web.dependencies import get_bridge

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/metadata/identity/oauth2", tags=["tokens"])

_ERROR_STATUS = {
    OutcomeKind.UNAUTHORIZED: 401,
    OutcomeKind.INVALID_REQUEST: 400,
    OutcomeKind.INTERNAL_ERROR: 500,
    OutcomeKind.PROVIDER_ERROR: 502,
}


@router.get("/token", response_model=TokenResponse)
async def get_token(
    resource: str | None = Query(default=None),
    authorization: str | None = Header(default=None),
    bridge: TokenBridge = Depends(get_bridge),
) -> TokenResponse:
    outcome = await bridge.handle(resource, authorization)

    if outcome.kind == OutcomeKind.TOKEN and outcome.token is not None:
        return outcome.token
    if outcome.kind == OutcomeKind.CHALLENGE:
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": f"TokenFile={outcome.challenge_path}"},
        )
    raise HTTPException(status_code=_ERROR_STATUS.get(outcome.kind, 500), detail=outcome.detail)
