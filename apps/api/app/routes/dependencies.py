"""Dependency wiring for routes."""

from __future__ import annotations

from functools import lru_cache
import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Response, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import (
    AuthVerificationError,
    BcryptCredentialVerifier,
    CredentialVerifier,
    ExpiredTokenError,
    JwtTokenService,
)
from app.core.boundary import OperationBoundary
from app.core.config import Settings, get_settings
from app.core.logging_safety import safe_log_identifier
from app.errors import forbidden, unauthenticated
from app.repositories.memory import InMemoryStore
from app.repositories.refresh_tokens import RefreshTokenRegistry
from app.schemas.auth import AuthPrincipal
from app.services.auth import AuthService
from app.services.cards import CardService
from app.services.groups import GroupService
from app.services.messages import MessageService

REFRESH_COOKIE_NAME = "refreshToken"

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_token_service(settings: Annotated[Settings, Depends(get_settings)]) -> JwtTokenService:
    return JwtTokenService.from_settings(settings)


@lru_cache(maxsize=4)
def _credential_verifier(rounds: int) -> BcryptCredentialVerifier:
    return BcryptCredentialVerifier(rounds=rounds)


def get_credential_verifier(settings: Annotated[Settings, Depends(get_settings)]) -> CredentialVerifier:
    return _credential_verifier(settings.bcrypt_rounds)


def get_operation_boundary(settings: Annotated[Settings, Depends(get_settings)]) -> OperationBoundary:
    return OperationBoundary(timeout_seconds=settings.storage_timeout_seconds)


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    tokens: Annotated[JwtTokenService, Depends(get_token_service)],
) -> AuthPrincipal:
    """Validate the bearer access token and attach the principal to the request context.

    No Authorization header at all is a 401; a header that does not yield a
    valid, unexpired access token is a 403.
    """
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    if credentials is None or not credentials.credentials:
        if not request.headers.get("Authorization"):
            logger.warning(
                "auth.rejected correlation_id=%s method=%s path=%s reason=missing_bearer",
                safe_correlation_id,
                request.method,
                request.url.path,
            )
            raise unauthenticated("Authentication required")

        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=malformed_authorization",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise forbidden("Invalid token")

    try:
        principal = tokens.verify_access_token(credentials.credentials)
    except ExpiredTokenError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_expired",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise forbidden(str(exc)) from exc
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise forbidden(str(exc) or "Invalid token") from exc

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s role=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_log_identifier(principal.id, prefix="pid"),
        principal.role.value,
    )
    request.state.auth_principal = principal
    return principal


async def get_presented_refresh_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
) -> str:
    """Refresh token from the bearer header, falling back to the HTTP-only cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    if request.headers.get("Authorization"):
        raise forbidden("Invalid refresh token")

    cookie_token = request.cookies.get(REFRESH_COOKIE_NAME)
    if cookie_token:
        return cookie_token
    raise unauthenticated("Refresh token not found")


def set_refresh_cookie(response: Response, refresh_token: str, settings: Settings) -> None:
    response.set_cookie(
        REFRESH_COOKIE_NAME,
        value=refresh_token,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="lax",
        max_age=settings.refresh_token_ttl_seconds,
    )


def clear_refresh_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        REFRESH_COOKIE_NAME,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="lax",
    )


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_refresh_registry(request: Request) -> RefreshTokenRegistry:
    return request.app.state.refresh_tokens


def get_auth_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    registry: Annotated[RefreshTokenRegistry, Depends(get_refresh_registry)],
    tokens: Annotated[JwtTokenService, Depends(get_token_service)],
    credentials: Annotated[CredentialVerifier, Depends(get_credential_verifier)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    return AuthService(
        store,
        registry=registry,
        tokens=tokens,
        credentials=credentials,
        settings=settings,
    )


def get_group_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> GroupService:
    return GroupService(store)


def get_card_service(store: Annotated[InMemoryStore, Depends(get_store)]) -> CardService:
    return CardService(store)


def get_message_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageService:
    return MessageService(store, broadcast_requires_admin=settings.broadcast_requires_admin)
