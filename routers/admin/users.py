"""Admin router for managing user accounts. Every route requires an admin access token.
"""

import logfire

from fastapi import APIRouter, status, Depends, Response
from fastapi.responses import JSONResponse

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from typing import Annotated, List

from schema.security import TokenUser
from schema.users import CreateUserRequest, UpdateUserRequest, UserResponse

from security.exceptions import HashingError
from security.helpers import get_password_hasher, hash_password, require_admin
from security.passwords import PasswordHasher

from services.accounts import AccountExistsError, AccountStore, get_account_store

router = APIRouter(
    prefix="/api/admin/users",
    tags=["Admin: Users"],
    dependencies=[Depends(require_admin)],
)


def _database_unavailable() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Service temporarily unavailable"},
    )


def _user_not_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": "User not found"},
    )


def _hashing_failed() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


@router.get("", response_model=List[UserResponse])
async def get_all_users(store: Annotated[AccountStore, Depends(get_account_store)]):
    """List all accounts, ordered by e-mail."""
    try:
        accounts = await store.list_accounts()
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error("Database unavailable while listing users")
        return _database_unavailable()

    return [UserResponse.from_account(account) for account in accounts]


@router.get("/{account_id}", response_model=UserResponse)
async def get_user(
    account_id: str,
    store: Annotated[AccountStore, Depends(get_account_store)],
):
    """Get a single account by its ID.

    ## Possible Errors
    - 404 Not Found: If no account has this ID, or the ID is malformed.
    """
    try:
        account = await store.find_account_by_id(account_id)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable while loading user {account_id}")
        return _database_unavailable()

    if account is None:
        return _user_not_found()

    return UserResponse.from_account(account)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: CreateUserRequest,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[AccountStore, Depends(get_account_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
):
    """Create a new account.

    ## Possible Errors
    - 409 Conflict: If an account with the provided e-mail already exists.
    - 500 Internal Server Error: If the password could not be hashed.
    - 503 Service Unavailable: If there is a database connection issue.
    """
    try:
        with logfire.span(f"Creating new user: {payload.email}"):
            password_hash = await hash_password(hasher, payload.password)

            account = await store.create_account(
                first_name=payload.first_name,
                last_name=payload.last_name,
                email=payload.email,
                password_hash=password_hash,
                is_admin=payload.is_admin,
            )
    except AccountExistsError:
        logfire.warning(f"Attempt to create duplicate user: {payload.email}")
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": "A user with this email already exists"},
        )
    except HashingError as e:
        logfire.error(f"Password hashing failed for new user {payload.email}: {e}")
        return _hashing_failed()
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when creating user: {payload.email}")
        return _database_unavailable()

    logfire.info(f"User {account.email} created by {admin.email}")
    return UserResponse.from_account(account)


@router.put("/{account_id}", response_model=UserResponse)
async def update_user(
    account_id: str,
    payload: UpdateUserRequest,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[AccountStore, Depends(get_account_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
):
    """Update an account by its ID. Only the fields present in the body change.

    Changes reach the user's tokens the next time they log in or refresh.

    ## Possible Errors
    - 404 Not Found: If no account has this ID, or the ID is malformed.
    - 409 Conflict: If the new e-mail is already used by another account.
    - 500 Internal Server Error: If the new password could not be hashed.
    - 503 Service Unavailable: If there is a database connection issue.
    """
    changes = payload.model_dump(exclude_none=True)

    try:
        account = await store.find_account_by_id(account_id)
        if account is None:
            return _user_not_found()

        if "password" in changes:
            changes["password"] = await hash_password(hasher, changes["password"])

        account = await store.update_account(account, changes)
    except AccountExistsError:
        logfire.warning(f"Attempt to move user {account.email} to a taken e-mail")
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": "A user with this email already exists"},
        )
    except HashingError as e:
        logfire.error(f"Password hashing failed while updating user {account_id}: {e}")
        return _hashing_failed()
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when updating user: {account_id}")
        return _database_unavailable()

    logfire.info(f"User {account.email} updated by {admin.email}: {sorted(changes)}")
    return UserResponse.from_account(account)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    account_id: str,
    admin: Annotated[TokenUser, Depends(require_admin)],
    store: Annotated[AccountStore, Depends(get_account_store)],
):
    """Delete an account by its ID.

    Tokens already issued to the account stay valid until they expire, but they
    can no longer be refreshed.
    """
    try:
        account = await store.find_account_by_id(account_id)
        if account is None:
            return _user_not_found()

        await store.delete_account(account)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable when deleting user: {account_id}")
        return _database_unavailable()

    logfire.info(f"User {account.email} deleted by {admin.email}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
