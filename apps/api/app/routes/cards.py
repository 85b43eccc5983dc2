"""Card routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.core.boundary import OperationBoundary
from app.routes.dependencies import get_authenticated_principal, get_card_service, get_operation_boundary
from app.schemas.auth import AuthPrincipal
from app.schemas.card import Card, CreateCardRequest, UpdateCardRequest
from app.schemas.error import ErrorResponse, NoLeakNotFoundError
from app.services.cards import CardService

router = APIRouter(prefix="/cards", tags=["Cards"])


@router.post(
    "",
    response_model=Card,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)
async def create_card(
    payload: CreateCardRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[CardService, Depends(get_card_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> Card:
    return await boundary.run(
        service.create_card,
        principal=principal,
        word=payload.word,
        translate=payload.translate,
        description=payload.description,
        group_name=payload.group_name,
        group_id=payload.group_id,
    )


@router.get("", response_model=list[Card])
async def list_cards(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[CardService, Depends(get_card_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> list[Card]:
    return await boundary.run(service.list_cards, principal=principal)


@router.get(
    "/{cardId}",
    response_model=Card,
    responses={404: {"model": NoLeakNotFoundError}},
)
async def get_card(
    card_id: Annotated[str, Path(alias="cardId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[CardService, Depends(get_card_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> Card:
    return await boundary.run(service.get_card, principal=principal, card_id=card_id)


@router.patch(
    "/{cardId}",
    response_model=Card,
    responses={400: {"model": ErrorResponse}, 404: {"model": NoLeakNotFoundError}},
)
async def update_card(
    card_id: Annotated[str, Path(alias="cardId")],
    payload: UpdateCardRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[CardService, Depends(get_card_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> Card:
    return await boundary.run(
        service.update_card,
        principal=principal,
        card_id=card_id,
        word=payload.word,
        translate=payload.translate,
        description=payload.description,
    )
