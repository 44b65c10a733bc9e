"""Factory for creating token provider instances."""

from collections.abc import Mapping
from typing import Any

from credbridge.exceptions import ConfigError
from credbridge.providers.base import TokenProviderBase
from credbridge.providers.static import StaticTokenProvider
from credbridge.types import TokenProviderKind


def create_token_provider(
    provider: TokenProviderKind | str,
    static_token: str | None = None,
    static_token_lifetime_seconds: int = 3600,
    azure_credential_options: Mapping[str, Any] | None = None,
) -> TokenProviderBase:
    """Create a token provider instance."""
    provider_str = str(provider)

    if provider_str == TokenProviderKind.AZURE:
        from credbridge.providers.azure import AzureTokenProvider

        return AzureTokenProvider(options=azure_credential_options)
    elif provider_str == TokenProviderKind.STATIC:
        if not static_token:
            raise ConfigError("STATIC_TOKEN required for the static token provider")
        return StaticTokenProvider(static_token, lifetime_seconds=static_token_lifetime_seconds)
    else:
        raise ConfigError(f"Unsupported token provider: {provider}")
