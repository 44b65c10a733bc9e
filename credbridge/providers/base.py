"""Abstract token provider interface."""

from abc import ABC, abstractmethod

from pydantic import BaseModel


class AccessToken(BaseModel):
    token: str
    expires_on: int  # unix seconds


class TokenProviderBase(ABC):
    """Abstract base for all token providers."""

    @abstractmethod
    async def get_token(self, resource: str) -> AccessToken:
        """Return a bearer token for ``resource``.

        Raises:
            TokenProviderError: if credentials cannot be resolved.
        """
