"""Authentication service: registration, login and the refresh-token lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from secrets import compare_digest

from app.adapters.auth import AuthVerificationError, CredentialVerifier, JwtTokenService
from app.core.config import Settings
from app.core.logging_safety import safe_log_identifier
from app.errors import forbidden, validation_error
from app.repositories.memory import InMemoryStore, UserRecord
from app.repositories.refresh_tokens import RefreshTokenRegistry
from app.schemas.auth import AuthPrincipal, Role

logger = logging.getLogger(__name__)

_INVALID_REFRESH_TOKEN = "Invalid refresh token"


@dataclass(slots=True)
class IssuedTokens:
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(
        self,
        store: InMemoryStore,
        *,
        registry: RefreshTokenRegistry,
        tokens: JwtTokenService,
        credentials: CredentialVerifier,
        settings: Settings,
    ) -> None:
        self._store = store
        self._registry = registry
        self._tokens = tokens
        self._credentials = credentials
        self._settings = settings

    def register(self, *, username: str, password: str) -> IssuedTokens:
        return self._register(username=username, password=password, role=Role.USER)

    def register_admin(self, *, username: str | None, password: str | None, secret_key: str | None) -> IssuedTokens:
        # The shared secret is checked before anything else about the request.
        expected = self._settings.admin_registration_secret.encode("utf-8")
        if secret_key is None or not compare_digest(secret_key.encode("utf-8"), expected):
            logger.warning("auth.admin_registration_rejected reason=invalid_secret")
            raise forbidden()
        if not username or not password:
            raise validation_error("Username and password are required")
        return self._register(username=username, password=password, role=Role.ADMIN)

    def login(self, *, username: str, password: str) -> IssuedTokens:
        user = self._store.get_user_by_username(username)
        password_hash = user.password_hash if user is not None else None
        verified = self._credentials.verify_password(password, password_hash)
        if user is None or not verified:
            logger.info("auth.login_rejected reason=bad_credentials")
            raise validation_error("Invalid username or password")
        return self._issue(user)

    def refresh(self, refresh_token: str) -> IssuedTokens:
        """Exchange a refresh token for a new pair, retiring the presented one."""
        try:
            claimed = self._tokens.verify_refresh_token(refresh_token)
        except AuthVerificationError as exc:
            logger.warning("auth.refresh_rejected reason=%s", exc.__class__.__name__)
            raise forbidden(_INVALID_REFRESH_TOKEN) from exc

        # revoke() doubles as an atomic claim: only one caller can retire a given token.
        was_active = self._registry.revoke(refresh_token)
        if self._settings.enforce_refresh_registry and not was_active:
            logger.warning(
                "auth.refresh_rejected reason=not_registered principal_id=%s",
                safe_log_identifier(claimed.id, prefix="pid"),
            )
            raise forbidden(_INVALID_REFRESH_TOKEN)

        # Role and username come from the live record, so changes apply from this point on.
        user = self._store.get_user(claimed.id)
        if user is None:
            raise forbidden(_INVALID_REFRESH_TOKEN)
        return self._issue(user)

    def logout(self, refresh_token: str) -> None:
        try:
            principal = self._tokens.verify_refresh_token(refresh_token)
        except AuthVerificationError as exc:
            raise forbidden(_INVALID_REFRESH_TOKEN) from exc

        revoked = self._registry.revoke(refresh_token)
        logger.info(
            "auth.logout principal_id=%s revoked=%s",
            safe_log_identifier(principal.id, prefix="pid"),
            revoked,
        )

    def _register(self, *, username: str, password: str, role: Role) -> IssuedTokens:
        password_hash = self._credentials.hash_password(password)
        user = self._store.create_user(username=username, password_hash=password_hash, role=role)
        logger.info(
            "auth.registered principal_id=%s role=%s",
            safe_log_identifier(user.id, prefix="pid"),
            user.role.value,
        )
        return self._issue(user)

    def _issue(self, user: UserRecord) -> IssuedTokens:
        principal = AuthPrincipal(id=user.id, username=user.username, role=user.role)
        access_token = self._tokens.issue_access_token(principal)
        refresh_token = self._tokens.issue_refresh_token(principal)
        self._registry.record(refresh_token, self._tokens.expires_at(refresh_token))
        return IssuedTokens(access_token=access_token, refresh_token=refresh_token)


__all__ = ["AuthService", "IssuedTokens"]
