"""Catalog Store: reads and writes the category and service documents."""

import pytz
import logfire

from datetime import datetime

from beanie import PydanticObjectId
from beanie.operators import And
from bson.errors import InvalidId
from pymongo.errors import DuplicateKeyError

from models.catalog import Category, Service


class SlugExistsError(Exception):
    """Raised when a slug is already used by another service."""


class CatalogStore:
    """Beanie-backed store of `Category` and `Service` documents.

    Lookups by ID return None for IDs that are not valid ObjectIds, the same as for
    IDs that match nothing.
    """

    async def list_categories(self, published_only: bool = False) -> list[Category]:
        """Categories ordered by sort order, then by name."""
        query = Category.find(Category.is_published == True) if published_only else Category.find_all()
        return await query.sort(+Category.sort_order, +Category.name).to_list()

    async def find_category_by_id(self, category_id: str) -> Category | None:
        try:
            return await Category.get(PydanticObjectId(category_id))
        except (InvalidId, TypeError):
            return None

    async def create_category(self, fields: dict) -> Category:
        category = Category(**fields)
        await category.insert()
        logfire.info(f"Saved new category to database: {category.id}")
        return category

    async def update_category(self, category: Category, fields: dict) -> Category:
        for field, value in fields.items():
            setattr(category, field, value)
        category.updated_at = datetime.now(pytz.utc)
        await category.save()
        return category

    async def delete_category(self, category: Category) -> None:
        await category.delete()

    async def count_services_in_category(self, category_id: str) -> int:
        return await Service.find(Service.category_id == category_id).count()

    async def list_services(
        self, category_id: str | None = None, published_only: bool = False
    ) -> list[Service]:
        """Services ordered by name, optionally limited to one category or to published ones."""
        conditions = []
        if category_id is not None:
            conditions.append(Service.category_id == category_id)
        if published_only:
            conditions.append(Service.is_published == True)

        query = Service.find(And(*conditions)) if conditions else Service.find_all()
        return await query.sort(+Service.name).to_list()

    async def find_service_by_slug(self, slug: str) -> Service | None:
        return await Service.find_one(Service.slug == slug)

    async def find_service_by_id(self, service_id: str) -> Service | None:
        try:
            return await Service.get(PydanticObjectId(service_id))
        except (InvalidId, TypeError):
            return None

    async def create_service(self, fields: dict) -> Service:
        """Insert a new service.

        Raises:
            SlugExistsError: Raised when the slug is already taken.
        """
        service = Service(**fields)
        try:
            await service.insert()
        except DuplicateKeyError as e:
            raise SlugExistsError(service.slug) from e
        logfire.info(f"Saved new service to database: {service.slug}")
        return service

    async def update_service(self, service: Service, fields: dict) -> Service:
        """Apply `fields` to `service` and save it.

        Raises:
            SlugExistsError: Raised when the new slug is already taken.
        """
        for field, value in fields.items():
            setattr(service, field, value)
        service.updated_at = datetime.now(pytz.utc)
        try:
            await service.save()
        except DuplicateKeyError as e:
            raise SlugExistsError(service.slug) from e
        return service

    async def delete_service(self, service: Service) -> None:
        await service.delete()


def get_catalog_store() -> CatalogStore:
    """FastAPI dependency returning the catalog store."""
    return CatalogStore()
