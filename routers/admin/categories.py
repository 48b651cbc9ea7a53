"""Admin router for managing categories. Every route requires an admin access token.
"""

import logfire

from fastapi import APIRouter, status, Depends, Response
from fastapi.responses import JSONResponse

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from typing import Annotated, List

from schema.catalog import CategoryRequest, CategoryResponse
from schema.security import TokenUser

from security.helpers import require_admin

from services.catalog import CatalogStore, get_catalog_store

router = APIRouter(
    prefix="/api/admin/categories",
    tags=["Admin: Categories"],
    dependencies=[Depends(require_admin)],
)


def _category_not_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Category not found"},
    )


def _database_unavailable() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable"},
    )


@router.get("", response_model=List[CategoryResponse])
async def get_all_categories(store: Annotated[CatalogStore, Depends(get_catalog_store)]):
    """List every category, published or not, by sort order then name."""
    try:
        categories = await store.list_categories()
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error("Database unavailable while listing categories")
        return _database_unavailable()

    return [CategoryResponse.from_document(category) for category in categories]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryRequest,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
):
    """Create a new category."""
    try:
        with logfire.span(f"Creating category: {payload.name}"):
            category = await store.create_category(payload.model_dump())
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when creating category: {payload.name}")
        return _database_unavailable()

    logfire.info(f"Category {category.id} created by {admin.email}")
    return CategoryResponse.from_document(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    payload: CategoryRequest,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
):
    """Replace the fields of a category.

    ## Possible Errors
    - 404 Not Found: If no category has this ID, or the ID is malformed.
    """
    try:
        category = await store.find_category_by_id(category_id)
        if category is None:
            return _category_not_found()

        category = await store.update_category(category, payload.model_dump())
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when updating category: {category_id}")
        return _database_unavailable()

    logfire.info(f"Category {category_id} updated by {admin.email}")
    return CategoryResponse.from_document(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
):
    """Delete a category.

    ## Possible Errors
    - 404 Not Found: If no category has this ID, or the ID is malformed.
    - 409 Conflict: If services still belong to the category.
    """
    try:
        category = await store.find_category_by_id(category_id)
        if category is None:
            return _category_not_found()

        if await store.count_services_in_category(str(category.id)):
            logfire.warning(f"Refused to delete category {category_id} that still has services")
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": "Category still has services. Move or delete them first."},
            )

        await store.delete_category(category)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when deleting category: {category_id}")
        return _database_unavailable()

    logfire.info(f"Category {category_id} deleted by {admin.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
