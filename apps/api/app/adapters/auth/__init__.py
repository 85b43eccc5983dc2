"""Auth verifier adapters."""

from .base import (
    AuthVerificationError,
    CredentialVerifier,
    ExpiredTokenError,
    InvalidTokenError,
    TokenVerifier,
)
from .jwt_tokens import JwtTokenService
from .passwords import BcryptCredentialVerifier

__all__ = [
    "AuthVerificationError",
    "BcryptCredentialVerifier",
    "CredentialVerifier",
    "ExpiredTokenError",
    "InvalidTokenError",
    "JwtTokenService",
    "TokenVerifier",
]
