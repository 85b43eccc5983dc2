"""Group API schemas."""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.card import Card


class CreateGroupRequest(CamelModel):
    group_name: str = Field(min_length=1)


class Group(CamelModel):
    id: str
    group_name: str
    created_by: str
    cards: list[Card]
    created_at: datetime


class DeleteGroupResponse(CamelModel):
    message: str
    group: Group
