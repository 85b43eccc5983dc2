"""Group routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.core.boundary import OperationBoundary
from app.routes.dependencies import get_authenticated_principal, get_group_service, get_operation_boundary
from app.schemas.auth import AuthPrincipal
from app.schemas.error import ErrorResponse, NoLeakNotFoundError
from app.schemas.group import CreateGroupRequest, DeleteGroupResponse, Group
from app.services.groups import GroupService

router = APIRouter(tags=["Groups"])


@router.post(
    "/groups",
    response_model=Group,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_group(
    payload: CreateGroupRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> Group:
    return await boundary.run(service.upsert_group, principal=principal, group_name=payload.group_name)


@router.get("/groups", response_model=list[Group])
async def list_groups(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> list[Group]:
    return await boundary.run(service.list_own_groups, principal=principal)


@router.get(
    "/groups-all",
    response_model=list[Group],
    responses={403: {"model": ErrorResponse}},
)
async def list_all_groups(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> list[Group]:
    return await boundary.run(service.list_all_groups, principal=principal)


@router.get(
    "/groups/{groupId}",
    response_model=Group,
    responses={404: {"model": NoLeakNotFoundError}},
)
async def get_group(
    group_id: Annotated[str, Path(alias="groupId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> Group:
    return await boundary.run(service.get_group, principal=principal, group_id=group_id)


@router.delete(
    "/groups/{groupId}",
    response_model=DeleteGroupResponse,
    responses={404: {"model": NoLeakNotFoundError}},
)
async def delete_group(
    group_id: Annotated[str, Path(alias="groupId")],
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[GroupService, Depends(get_group_service)],
    boundary: Annotated[OperationBoundary, Depends(get_operation_boundary)],
) -> DeleteGroupResponse:
    group = await boundary.run(service.delete_group, principal=principal, group_id=group_id)
    return DeleteGroupResponse(message="Group was deleted successfully", group=group)
