"""Bridge settings via Pydantic BaseSettings."""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

from credbridge.types import TokenProviderKind

_PERCENT_VAR = re.compile(r"%([A-Za-z_][A-Za-z0-9_]*)%")


def expand_path(raw: str) -> Path:
    """Expand ``~``, ``$VAR`` and ``%VAR%`` references in a path.

    Unknown ``%VAR%`` references are left untouched, as ``os.path.expandvars``
    does for ``$VAR``.
    """

    def _lookup(match: re.Match[str]) -> str:
        return os.environ.get(match.group(1), match.group(0))

    expanded = _PERCENT_VAR.sub(_lookup, os.path.expandvars(raw))
    return Path(expanded).expanduser()


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # File challenge gate
    use_file_challenge_auth: bool = True
    local_tokens_path: str = "~/.LocalCredentialBridgeTokens"
    remote_tokens_path: str = "/var/opt/azcmagent/tokens"
    challenge_timeout_seconds: int = Field(default=10, gt=0)
    sweep_interval_seconds: float = Field(default=1.0, gt=0)

    # Token provider
    token_provider: TokenProviderKind = TokenProviderKind.AZURE
    static_token: str | None = None
    static_token_lifetime_seconds: int = Field(default=3600, gt=0)
    # Keyword arguments for DefaultAzureCredential, as JSON in the environment,
    # e.g. AZURE_CREDENTIAL_OPTIONS='{"exclude_cli_credential": true}'
    azure_credential_options: dict[str, Any] = Field(default_factory=dict)

    # App
    host: str = "0.0.0.0"  # nosec B104
    port: int = 40342
    debug: bool = False
    log_level: str = "INFO"

    @property
    def local_tokens_dir(self) -> Path:
        """The local tokens directory with variables expanded."""
        return expand_path(self.local_tokens_path)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
