"""Azure token provider backed by the host's DefaultAzureCredential."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import structlog
from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential

from credbridge.exceptions import TokenProviderError
from credbridge.providers.base import AccessToken, TokenProviderBase

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential

logger = structlog.get_logger(__name__)

DEFAULT_SCOPE_SUFFIX = "/.default"


def resource_to_scope(resource: str) -> str:
    """Convert a v1 resource identifier into a ``/.default`` scope."""
    if resource.endswith(DEFAULT_SCOPE_SUFFIX):
        return resource
    return resource.rstrip("/") + DEFAULT_SCOPE_SUFFIX


class AzureTokenProvider(TokenProviderBase):
    """Resolves tokens with ``azure-identity``.

    ``options`` are passed to ``DefaultAzureCredential`` as keyword arguments
    (tenant ids, ``exclude_*_credential`` flags and so on). The managed identity
    credential is always excluded: on a host running this bridge it would
    resolve to the bridge itself.
    """

    def __init__(
        self,
        credential: TokenCredential | None = None,
        options: Mapping[str, Any] | None = None,
    ):
        if credential is None:
            kwargs = {**(options or {}), "exclude_managed_identity_credential": True}
            credential = DefaultAzureCredential(**kwargs)
        self._credential = credential

    async def get_token(self, resource: str) -> AccessToken:
        scope = resource_to_scope(resource)
        try:
            token = await asyncio.to_thread(self._credential.get_token, scope)
        except AzureError as exc:
            logger.error("azure_token_failed", resource=resource, error=str(exc))
            raise TokenProviderError(f"Azure credential failed for {resource}: {exc}") from exc
        return AccessToken(token=token.token, expires_on=int(token.expires_on))
