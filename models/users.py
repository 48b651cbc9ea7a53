import pytz

from datetime import datetime

from pydantic import Field, EmailStr, field_serializer
from typing import Annotated

from beanie import Document, Indexed, PydanticObjectId


class Account(Document):
    """Account of a person who can sign in to the admin dashboard.

    E-mails are stored lower-cased, see `services.accounts.normalize_email`.
    """
    first_name: Annotated[str, Field(max_length=50, min_length=1, serialization_alias="firstName")]
    last_name: Annotated[str, Field(max_length=50, min_length=1, serialization_alias="lastName")]
    email: Annotated[EmailStr, Indexed(unique=True), Field(max_length=254)]
    password: Annotated[str, Field()]  # bcrypt hash, never sent to clients
    is_admin: Annotated[bool, Field(default=False, serialization_alias="isAdmin")]
    created_at: Annotated[datetime, Field(default_factory=lambda: datetime.now(pytz.utc), serialization_alias="createdAt")]
    updated_at: Annotated[datetime, Field(default_factory=lambda: datetime.now(pytz.utc), serialization_alias="updatedAt")]

    @field_serializer("id")
    def convert_pydantic_object_id_to_string(self, id: PydanticObjectId):
        return str(id)

    class Settings:
        name = "users"
