"""Broadcast message routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.core.boundary import OperationBoundary
from app.routes.dependencies import get_authenticated_principal, get_message_service, get_operation_boundary
from app.schemas.auth import AuthPrincipal, StatusMessage
from app.schemas.error import ErrorResponse
from app.schemas.message import CreateMessageRequest, Message
from app.services.messages import MessageService

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post(
    "",
    response_model=StatusMessage,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def send_message(
    payload: CreateMessageRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[MessageService, Depends(get_message_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> StatusMessage:
    await boundary.run(service.broadcast, principal=principal, title=payload.title, body=payload.body)
    return StatusMessage(message="Message sent successfully")


@router.get("", response_model=list[Message])
async def list_messages(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[MessageService, Depends(get_message_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> list[Message]:
    return await boundary.run(service.list_messages, principal=principal)
