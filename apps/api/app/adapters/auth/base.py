"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from app.schemas.auth import AuthPrincipal


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class InvalidTokenError(AuthVerificationError):
    """Signature mismatch, malformed input or unusable claims."""


class ExpiredTokenError(AuthVerificationError):
    """Well-formed token whose expiry has passed."""


class TokenVerifier(ABC):
    """Two-outcome token verification: a principal, or an AuthVerificationError."""

    @abstractmethod
    def verify_access_token(self, token: str) -> AuthPrincipal:
        """Verify an access token and return its principal."""

    @abstractmethod
    def verify_refresh_token(self, token: str) -> AuthPrincipal:
        """Verify a refresh token and return its principal."""


class CredentialVerifier(ABC):
    """One-way password hashing primitive."""

    @abstractmethod
    def hash_password(self, password: str) -> str:
        """Return an opaque hash for storage."""

    @abstractmethod
    def verify_password(self, password: str, password_hash: str | None) -> bool:
        """Check a password; a missing hash must cost the same as a real check."""


__all__ = [
    "AuthVerificationError",
    "CredentialVerifier",
    "ExpiredTokenError",
    "InvalidTokenError",
    "TokenVerifier",
]
