"""Contains the schema definition for requests and responses related to users
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr, model_validator

from typing import Annotated, Self


class CreateUserRequest(BaseModel):
    """Describes the structure of the admin create user request."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: Annotated[str, Field(max_length=50, min_length=1, alias="firstName")]
    last_name: Annotated[str, Field(max_length=50, min_length=1, alias="lastName")]
    email: Annotated[EmailStr, Field(max_length=254)]
    password: Annotated[str, Field(min_length=8, max_length=64)]
    is_admin: Annotated[bool, Field(default=False, alias="isAdmin")]


class UpdateUserRequest(BaseModel):
    """Describes the structure of the admin update user request. Omitted fields stay unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: Annotated[str | None, Field(default=None, max_length=50, min_length=1, alias="firstName")]
    last_name: Annotated[str | None, Field(default=None, max_length=50, min_length=1, alias="lastName")]
    email: Annotated[EmailStr | None, Field(default=None, max_length=254)]
    password: Annotated[str | None, Field(default=None, min_length=8, max_length=64)]
    is_admin: Annotated[bool | None, Field(default=None, alias="isAdmin")]

    # * An update has to change something
    @model_validator(mode="after")
    def check_not_empty(self) -> Self:
        if not self.model_dump(exclude_none=True):
            raise ValueError("No fields to update")
        return self


class UserResponse(BaseModel):
    """Describes an account as it is sent to clients, without the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: Annotated[str, Field(description="Unique identifier for the user")]
    first_name: Annotated[str, Field(alias="firstName")]
    last_name: Annotated[str, Field(alias="lastName")]
    email: Annotated[str, Field()]
    is_admin: Annotated[bool, Field(alias="isAdmin")]

    @classmethod
    def from_account(cls, account) -> "UserResponse":
        return cls(
            id=str(account.id),
            first_name=account.first_name,
            last_name=account.last_name,
            email=account.email,
            is_admin=account.is_admin,
        )
