"""Security configuration shared by the password hasher and the token codec.
"""
import os

from datetime import timedelta
from functools import lru_cache

from dotenv import load_dotenv

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

from typing import Annotated, Self

load_dotenv()

ACCESS_TOKEN_TTL = timedelta(minutes=10)
REFRESH_TOKEN_TTL = timedelta(days=30)
PASSWORD_HASH_ROUNDS = 10


class SecuritySettings(BaseModel):
    """Immutable set of secrets and policies, built once at startup and injected
    into `PasswordHasher` and `TokenCodec`.
    """

    model_config = ConfigDict(frozen=True)

    access_token_secret: SecretStr
    refresh_token_secret: SecretStr
    password_pepper: SecretStr
    algorithm: Annotated[str, Field(default="HS256")]
    password_hash_rounds: Annotated[int, Field(default=PASSWORD_HASH_ROUNDS, ge=4, le=31)]
    access_token_ttl: Annotated[timedelta, Field(default=ACCESS_TOKEN_TTL)]
    refresh_token_ttl: Annotated[timedelta, Field(default=REFRESH_TOKEN_TTL)]

    @field_validator("access_token_secret", "refresh_token_secret", "password_pepper")
    @classmethod
    def check_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("Secret must not be empty")
        return v

    # * Access and refresh tokens never share a signing secret
    @model_validator(mode="after")
    def check_secrets_differ(self) -> Self:
        if (
            self.access_token_secret.get_secret_value()
            == self.refresh_token_secret.get_secret_value()
        ):
            raise ValueError("Access and refresh token secrets must differ")
        return self

    @classmethod
    def from_env(cls) -> "SecuritySettings":
        """Build the settings from `JWT_SECRET`, `JWT_REFRESH_SECRET` and `PEPPER`.

        Raises:
            pydantic.ValidationError: Raised when a secret is missing or empty.
        """
        return cls(
            access_token_secret=os.getenv("JWT_SECRET", ""),
            refresh_token_secret=os.getenv("JWT_REFRESH_SECRET", ""),
            password_pepper=os.getenv("PEPPER", ""),
        )


@lru_cache
def get_security_settings() -> SecuritySettings:
    """Return the process-wide security settings."""
    return SecuritySettings.from_env()
