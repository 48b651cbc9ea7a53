"""Public router for published services. No authentication required.
"""

import logfire

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from typing import Annotated, List

from schema.catalog import CategoryWithServices, ServiceDetail, ServiceSummary

from services.catalog import CatalogStore, get_catalog_store

router = APIRouter(
    prefix="/api/services",
    tags=["Services"],
)


@router.get("", response_model=List[CategoryWithServices])
async def get_categories_with_services(store: Annotated[CatalogStore, Depends(get_catalog_store)]):
    """List all published categories, each with its published services ordered by name."""
    try:
        result = []
        for category in await store.list_categories(published_only=True):
            services = await store.list_services(category_id=str(category.id), published_only=True)
            result.append(
                CategoryWithServices(
                    id=str(category.id),
                    name=category.name,
                    sort_order=category.sort_order,
                    services=[
                        ServiceSummary(
                            id=str(service.id),
                            name=service.name,
                            description=service.description,
                            price=service.price,
                            image_url=service.image_url,
                            slug=service.slug,
                        )
                        for service in services
                    ],
                )
            )
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error("Database unavailable while listing services")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable"},
        )

    return result


@router.get("/{slug}", response_model=ServiceDetail)
async def get_service_by_slug(
    slug: str,
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
):
    """Get a published service by its slug.

    ## Possible Errors
    - 404 Not Found: The service does not exist, is not published, or its category is not published.
    """
    try:
        service = await store.find_service_by_slug(slug)
        if service is None or not service.is_published:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"detail": "Service not found or not published."},
            )

        category = await store.find_category_by_id(service.category_id)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable while loading service {slug}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable"},
        )

    if category is None or not category.is_published:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Service category not found or not published."},
        )

    return ServiceDetail(
        id=str(service.id),
        name=service.name,
        description=service.description,
        price=service.price,
        image_url=service.image_url,
        category_id=service.category_id,
        category_name=category.name,
    )
