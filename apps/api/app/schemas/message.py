"""Message API schemas."""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel


class CreateMessageRequest(CamelModel):
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)


class Message(CamelModel):
    """Read projection; recipient ids are not exposed."""

    id: str
    title: str
    body: str
    created_at: datetime
