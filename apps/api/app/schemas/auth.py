"""Authentication schemas."""

from enum import Enum

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class AuthPrincipal(BaseModel):
    """Identity carried by a verified token; never persisted on its own."""

    id: str = Field(min_length=1)
    username: str = Field(min_length=1)
    role: Role = Role.USER

    def claims(self) -> dict[str, str]:
        return {"id": self.id, "username": self.username, "role": self.role.value}


class CredentialsRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AdminRegistrationRequest(CamelModel):
    # Optional so the shared secret is checked before field presence.
    username: str | None = None
    password: str | None = None
    secret_key: str | None = None


class TokenPair(CamelModel):
    token: str
    refresh_token: str


class RefreshedTokenPair(CamelModel):
    access_token: str
    refresh_token: str


class ProtectedResponse(BaseModel):
    message: str
    user: AuthPrincipal


class StatusMessage(BaseModel):
    message: str
