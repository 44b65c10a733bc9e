"""Enums and type aliases for the credential bridge."""

from enum import StrEnum


class TokenProviderKind(StrEnum):
    AZURE = "azure"
    STATIC = "static"


class EvictionReason(StrEnum):
    TAKEN = "taken"
    EXPIRED = "expired"
    REPLACED = "replaced"
    CLEARED = "cleared"


class AuthStatus(StrEnum):
    GRANTED = "granted"
    CHALLENGE = "challenge"
    REJECTED = "rejected"
    FAILED = "failed"


class OutcomeKind(StrEnum):
    TOKEN = "token"
    CHALLENGE = "challenge"
    UNAUTHORIZED = "unauthorized"
    INVALID_REQUEST = "invalid_request"
    INTERNAL_ERROR = "internal_error"
    PROVIDER_ERROR = "provider_error"
