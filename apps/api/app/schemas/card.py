"""Card API schemas."""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class CreateCardRequest(CamelModel):
    word: str = Field(min_length=1)
    translate: str = Field(min_length=1)
    group_name: str = Field(min_length=1)
    group_id: str = Field(min_length=1)
    description: str | None = None


class UpdateCardRequest(CamelModel):
    word: str = Field(min_length=1)
    translate: str = Field(min_length=1)
    description: str | None = None


class Card(CamelModel):
    id: str
    word: str
    translate: str
    description: str | None = None
    created_by: str
    created_at: datetime
