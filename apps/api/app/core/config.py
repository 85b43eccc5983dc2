"""Application configuration."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    jwt_secret: str = Field(min_length=1)
    refresh_token_secret: str = Field(min_length=1)
    admin_registration_secret: str = Field(min_length=1)
    jwt_algorithm: str = "HS256"
    access_token_ttl_seconds: int = Field(default=600, gt=0)
    refresh_token_ttl_seconds: int = Field(default=864000, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    enforce_refresh_registry: bool = True
    refresh_cookie_secure: bool = True
    broadcast_requires_admin: bool = False
    storage_timeout_seconds: float = Field(default=5.0, gt=0)

    model_config = SettingsConfigDict(env_prefix="LEXICARD_", extra="ignore")

    @model_validator(mode="after")
    def validate_distinct_signing_secrets(self) -> "Settings":
        if self.jwt_secret == self.refresh_token_secret:
            raise ValueError("LEXICARD_JWT_SECRET and LEXICARD_REFRESH_TOKEN_SECRET must differ")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
