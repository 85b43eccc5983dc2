"""Authentication routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.core.boundary import OperationBoundary
from app.core.config import Settings, get_settings
from app.routes.dependencies import (
    clear_refresh_cookie,
    get_auth_service,
    get_authenticated_principal,
    get_operation_boundary,
    get_presented_refresh_token,
    set_refresh_cookie,
)
from app.schemas.auth import (
    AdminRegistrationRequest,
    AuthPrincipal,
    CredentialsRequest,
    ProtectedResponse,
    RefreshedTokenPair,
    StatusMessage,
    TokenPair,
)
from app.schemas.error import ErrorResponse
from app.services.auth import AuthService, IssuedTokens

router = APIRouter(tags=["Auth"])


def _token_pair(issued: IssuedTokens, response: Response, settings: Settings) -> TokenPair:
    set_refresh_cookie(response, issued.refresh_token, settings)
    return TokenPair(token=issued.access_token, refresh_token=issued.refresh_token)


@router.post(
    "/register",
    response_model=TokenPair,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register(
    payload: CredentialsRequest,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenPair:
    issued = await boundary.run(service.register, username=payload.username, password=payload.password)
    return _token_pair(issued, response, settings)


@router.post(
    "/register-admin",
    response_model=TokenPair,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register_admin(
    payload: AdminRegistrationRequest,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenPair:
    issued = await boundary.run(
        service.register_admin,
        username=payload.username,
        password=payload.password,
        secret_key=payload.secret_key,
    )
    return _token_pair(issued, response, settings)


@router.post(
    "/login",
    response_model=TokenPair,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def login(
    payload: CredentialsRequest,
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenPair:
    issued = await boundary.run(service.login, username=payload.username, password=payload.password)
    return _token_pair(issued, response, settings)


@router.post(
    "/token",
    response_model=RefreshedTokenPair,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def refresh_token(
    presented: Annotated[str, Depends(get_presented_refresh_token)],
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RefreshedTokenPair:
    issued = await boundary.run(service.refresh, presented)
    set_refresh_cookie(response, issued.refresh_token, settings)
    return RefreshedTokenPair(access_token=issued.access_token, refresh_token=issued.refresh_token)


@router.post(
    "/logout",
    response_model=StatusMessage,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def logout(
    presented: Annotated[str, Depends(get_presented_refresh_token)],
    response: Response,
    service: Annotated[AuthService, Depends(get_auth_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> StatusMessage:
    await boundary.run(service.logout, presented)
    clear_refresh_cookie(response, settings)
    return StatusMessage(message="Logged out")


@router.get(
    "/protected",
    response_model=ProtectedResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def protected(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
) -> ProtectedResponse:
    return ProtectedResponse(message="This is a protected route", user=principal)
