"""Signed access/refresh token issuing and verification."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import jwt
from pydantic import ValidationError

from app.adapters.auth.base import ExpiredTokenError, InvalidTokenError, TokenVerifier
from app.core.config import Settings
from app.schemas.auth import AuthPrincipal


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenVerifier):
    """HS256 JWTs carrying ``{id, username, role}``.

    Access and refresh tokens are signed with different secrets, so neither
    kind verifies as the other. Refresh tokens also carry a random ``jti``
    so each issued value is unique.
    """

    def __init__(
        self,
        *,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=10),
        refresh_ttl: timedelta = timedelta(days=10),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._algorithm = algorithm
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings, *, clock: Callable[[], datetime] = _utcnow) -> JwtTokenService:
        return cls(
            access_secret=settings.jwt_secret,
            refresh_secret=settings.refresh_token_secret,
            algorithm=settings.jwt_algorithm,
            access_ttl=timedelta(seconds=settings.access_token_ttl_seconds),
            refresh_ttl=timedelta(seconds=settings.refresh_token_ttl_seconds),
            clock=clock,
        )

    def issue_access_token(self, principal: AuthPrincipal) -> str:
        return self._sign(principal.claims(), secret=self._access_secret, ttl=self._access_ttl)

    def issue_refresh_token(self, principal: AuthPrincipal) -> str:
        claims = {**principal.claims(), "jti": uuid4().hex}
        return self._sign(claims, secret=self._refresh_secret, ttl=self._refresh_ttl)

    def verify_access_token(self, token: str) -> AuthPrincipal:
        return self.verify(token, secret=self._access_secret)

    def verify_refresh_token(self, token: str) -> AuthPrincipal:
        return self.verify(token, secret=self._refresh_secret)

    def verify(self, token: str, *, secret: str) -> AuthPrincipal:
        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self._algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        try:
            return AuthPrincipal(id=claims["id"], username=claims["username"], role=claims["role"])
        except (KeyError, ValidationError) as exc:
            raise InvalidTokenError("Token is missing identity claims") from exc

    def expires_at(self, token: str) -> datetime:
        """Expiry of a token this service issued; the signature is not re-checked."""
        claims = jwt.decode(token, options={"verify_signature": False})
        return datetime.fromtimestamp(claims["exp"], UTC)

    def _sign(self, claims: dict[str, Any], *, secret: str, ttl: timedelta) -> str:
        issued_at = self._clock()
        payload = {**claims, "iat": issued_at, "exp": issued_at + ttl}
        return jwt.encode(payload, secret, algorithm=self._algorithm)


__all__ = ["JwtTokenService"]
