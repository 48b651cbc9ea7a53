"""Defines schema of requests, responses and token claims related to security"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from typing import Annotated


class TokenType(str, Enum):
    """Kinds of tokens issued by the API. The kind selects the signing secret and lifetime."""

    ACCESS = "accessToken"
    REFRESH = "refreshToken"


class TokenUser(BaseModel):
    """Snapshot of the account embedded in a token at issuance time."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: Annotated[str, Field(alias="firstName")]
    last_name: Annotated[str, Field(alias="lastName")]
    email: Annotated[str, Field()]
    is_admin: Annotated[bool, Field(default=False, alias="isAdmin")]


class TokenClaims(BaseModel):
    """Model representing the verified claim set of a token."""

    model_config = ConfigDict(populate_by_name=True)

    token_type: Annotated[TokenType, Field(alias="tokenType")]
    user: Annotated[TokenUser, Field()]
    exp: Annotated[int, Field()]  # Unix timestamp
    iat: Annotated[int | None, Field(default=None)]  # Unix timestamp


class TokenPair(BaseModel):
    """Model representing both access and refresh tokens."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: Annotated[str, Field(alias="accessToken")]
    refresh_token: Annotated[str, Field(alias="refreshToken")]


class LoginRequest(BaseModel):
    """Model for login request."""

    email: Annotated[EmailStr, Field(max_length=254)]
    password: Annotated[str, Field(min_length=1)]


class RefreshTokenRequest(BaseModel):
    """Model for refresh token request."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: Annotated[str, Field(alias="refreshToken")]
