"""Public router listing the published categories. No authentication required.
"""

import logfire

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from typing import Annotated, List

from schema.catalog import CategorySummary

from services.catalog import CatalogStore, get_catalog_store

router = APIRouter(
    prefix="/api/categories",
    tags=["Categories"],
)


@router.get("", response_model=List[CategorySummary])
async def get_all_categories(store: Annotated[CatalogStore, Depends(get_catalog_store)]):
    """List all published categories, by sort order then name."""
    try:
        categories = await store.list_categories(published_only=True)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error("Database unavailable while listing categories")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable"},
        )

    return [
        CategorySummary(id=str(category.id), name=category.name, image_url=category.image_url)
        for category in categories
    ]
