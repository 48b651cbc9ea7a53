"""Admin router for managing services. Every route requires an admin access token.
"""

import logfire

from fastapi import APIRouter, status, Depends, Response
from fastapi.responses import JSONResponse

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from typing import Annotated, List

from schema.catalog import ServiceRequest, ServiceResponse
from schema.security import TokenUser

from security.helpers import require_admin

from services.catalog import CatalogStore, SlugExistsError, get_catalog_store

router = APIRouter(
    prefix="/api/admin/services",
    tags=["Admin: Services"],
    dependencies=[Depends(require_admin)],
)


def _service_not_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "Service not found"},
    )


def _database_unavailable() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable"},
    )


def _slug_taken() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": "A service with this slug already exists"},
    )


async def _validate_payload(
    store: CatalogStore, payload: ServiceRequest
) -> tuple[dict | None, JSONResponse | None]:
    """Check the category and slug of `payload` and return the document fields to store."""
    if await store.find_category_by_id(payload.category_id) is None:
        return None, JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Category does not exist"},
        )

    slug = payload.resolved_slug()
    if not slug:
        return None, JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "A slug cannot be derived from this name. Provide one."},
        )

    fields = payload.model_dump(exclude={"slug"})
    fields["slug"] = slug
    return fields, None


@router.get("", response_model=List[ServiceResponse])
async def get_all_services(store: Annotated[CatalogStore, Depends(get_catalog_store)]):
    """List every service, published or not, ordered by name."""
    try:
        services = await store.list_services()
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error("Database unavailable while listing services")
        return _database_unavailable()

    return [ServiceResponse.from_document(service) for service in services]


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(
    payload: ServiceRequest,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
):
    """Create a new service. The slug defaults to one derived from the name.

    ## Possible Errors
    - 400 Bad Request: If the category does not exist.
    - 409 Conflict: If the slug is already used.
    """
    try:
        fields, error = await _validate_payload(store, payload)
        if error is not None:
            return error

        with logfire.span(f"Creating service: {fields['slug']}"):
            service = await store.create_service(fields)
    except SlugExistsError as e:
        logfire.warning(f"Attempt to create service with taken slug: {e}")
        return _slug_taken()
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when creating service: {payload.name}")
        return _database_unavailable()

    logfire.info(f"Service {service.slug} created by {admin.email}")
    return ServiceResponse.from_document(service)


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: str,
    payload: ServiceRequest,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
):
    """Replace the fields of a service.

    ## Possible Errors
    - 400 Bad Request: If the category does not exist.
    - 404 Not Found: If no service has this ID, or the ID is malformed.
    - 409 Conflict: If the slug is already used by another service.
    """
    try:
        service = await store.find_service_by_id(service_id)
        if service is None:
            return _service_not_found()

        fields, error = await _validate_payload(store, payload)
        if error is not None:
            return error

        service = await store.update_service(service, fields)
    except SlugExistsError as e:
        logfire.warning(f"Attempt to move service {service_id} to taken slug: {e}")
        return _slug_taken()
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when updating service: {service_id}")
        return _database_unavailable()

    logfire.info(f"Service {service_id} updated by {admin.email}")
    return ServiceResponse.from_document(service)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_service(
    service_id: str,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
):
    """Delete a service.

    ## Possible Errors
    - 404 Not Found: If no service has this ID, or the ID is malformed.
    """
    try:
        service = await store.find_service_by_id(service_id)
        if service is None:
            return _service_not_found()

        await store.delete_service(service)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when deleting service: {service_id}")
        return _database_unavailable()

    logfire.info(f"Service {service_id} deleted by {admin.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
