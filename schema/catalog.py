"""Contains the schema definition for requests and responses related to the catalog
"""
import re

from pydantic import BaseModel, ConfigDict, Field

from typing import Annotated, List

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def slugify(value: str) -> str:
    """Turn a service name into a URL slug, e.g. `"Deep Tissue Massage!"` -> `"deep-tissue-massage"`."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


class CategoryRequest(BaseModel):
    """Describes the structure of the admin create/update category request."""

    model_config = ConfigDict(populate_by_name=True)

    name: Annotated[str, Field(min_length=1, max_length=100)]
    image_url: Annotated[str | None, Field(default=None, alias="imageUrl")]
    sort_order: Annotated[int, Field(default=0, alias="sortOrder")]
    is_published: Annotated[bool, Field(default=False, alias="isPublished")]


class ServiceRequest(BaseModel):
    """Describes the structure of the admin create/update service request."""

    model_config = ConfigDict(populate_by_name=True)

    name: Annotated[str, Field(min_length=1, max_length=100)]
    description: Annotated[str, Field(default="", max_length=5000)]
    price: Annotated[float, Field(ge=0)]
    image_url: Annotated[str | None, Field(default=None, alias="imageUrl")]
    slug: Annotated[str | None, Field(default=None, max_length=120, pattern=SLUG_PATTERN)]
    category_id: Annotated[str, Field(alias="categoryId")]
    is_published: Annotated[bool, Field(default=False, alias="isPublished")]

    def resolved_slug(self) -> str:
        return self.slug or slugify(self.name)


class CategorySummary(BaseModel):
    """Published category as listed on the public site."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    image_url: Annotated[str | None, Field(default=None, alias="imageUrl")]


class CategoryResponse(CategorySummary):
    """Category as managed from the admin dashboard."""

    sort_order: Annotated[int, Field(alias="sortOrder")]
    is_published: Annotated[bool, Field(alias="isPublished")]

    @classmethod
    def from_document(cls, category) -> "CategoryResponse":
        return cls(
            id=str(category.id),
            name=category.name,
            image_url=category.image_url,
            sort_order=category.sort_order,
            is_published=category.is_published,
        )


class ServiceSummary(BaseModel):
    """Published service as listed under its category on the public site."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    price: float
    image_url: Annotated[str | None, Field(default=None, alias="imageUrl")]
    slug: str


class CategoryWithServices(BaseModel):
    """Published category together with its published services."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    sort_order: Annotated[int, Field(alias="sortOrder")]
    services: Annotated[List[ServiceSummary], Field(default=[])]


class ServiceDetail(BaseModel):
    """Public page of a single service."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    price: float
    image_url: Annotated[str | None, Field(default=None, alias="imageUrl")]
    category_id: Annotated[str, Field(alias="categoryId")]
    category_name: Annotated[str, Field(alias="categoryName")]


class ServiceResponse(ServiceSummary):
    """Service as managed from the admin dashboard."""

    category_id: Annotated[str, Field(alias="categoryId")]
    is_published: Annotated[bool, Field(alias="isPublished")]

    @classmethod
    def from_document(cls, service) -> "ServiceResponse":
        return cls(
            id=str(service.id),
            name=service.name,
            description=service.description,
            price=service.price,
            image_url=service.image_url,
            slug=service.slug,
            category_id=service.category_id,
            is_published=service.is_published,
        )
