"""Exception hierarchy for the credential bridge."""


class CredentialBridgeError(Exception):
    """Base exception for all credential bridge errors."""


class ChallengeIssueError(CredentialBridgeError):
    """Raised when a challenge file cannot be created or written."""


class TokenProviderError(CredentialBridgeError):
    """Raised when the underlying token provider cannot produce a token."""


class ConfigError(CredentialBridgeError):
    """Raised when configuration is invalid."""
