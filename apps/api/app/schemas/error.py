"""API error response schemas."""

from typing import Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    code: str


class NoLeakNotFoundError(BaseModel):
    error: str
    code: Literal["RESOURCE_NOT_FOUND"]
