"""Documents backing the public catalog: categories and the services inside them."""
import pytz

from datetime import datetime

from pydantic import Field, field_serializer

from typing import Annotated
from beanie import Document, Indexed, PydanticObjectId


class Category(Document):
    name: Annotated[str, Field(max_length=100)]
    image_url: Annotated[str | None, Field(default=None, serialization_alias="imageUrl")]
    sort_order: Annotated[int, Field(default=0, serialization_alias="sortOrder")]
    is_published: Annotated[bool, Field(default=False, serialization_alias="isPublished")]
    created_at: Annotated[datetime, Field(default_factory=lambda: datetime.now(pytz.utc))]
    updated_at: Annotated[datetime, Field(default_factory=lambda: datetime.now(pytz.utc))]

    @field_serializer("id")
    def convert_pydantic_object_id_to_string(self, id: PydanticObjectId):
        return str(id)

    class Settings:
        name = "categories"


class Service(Document):
    name: Annotated[str, Field(max_length=100)]
    description: Annotated[str, Field(default="", max_length=5000)]
    price: Annotated[float, Field(ge=0)]
    image_url: Annotated[str | None, Field(default=None, serialization_alias="imageUrl")]
    slug: Annotated[str, Indexed(unique=True), Field(max_length=120)]
    category_id: Annotated[str, Field(serialization_alias="categoryId")]  # ID of the owning category
    is_published: Annotated[bool, Field(default=False, serialization_alias="isPublished")]
    created_at: Annotated[datetime, Field(default_factory=lambda: datetime.now(pytz.utc))]
    updated_at: Annotated[datetime, Field(default_factory=lambda: datetime.now(pytz.utc))]

    @field_serializer("id")
    def convert_pydantic_object_id_to_string(self, id: PydanticObjectId):
        return str(id)

    class Settings:
        name = "services"
