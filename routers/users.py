""" User router for the signed-in user's own profile.
"""

import logfire

from fastapi import APIRouter, status, Depends
from fastapi.responses import JSONResponse

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from typing import Annotated

from schema.security import TokenUser
from schema.users import UserResponse

from security.helpers import get_current_identity

from services.accounts import AccountStore, get_account_store

router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
)


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    identity: Annotated[TokenUser, Depends(get_current_identity)],
    store: Annotated[AccountStore, Depends(get_account_store)],
):
    """Get the profile of the authenticated user.

    The account is read from the database, so the response reflects changes made
    after the access token was issued.

    ## Possible Errors
    - 401 Unauthorized: Missing, invalid or expired access token.
    - 404 Not Found: The account was deleted after the token was issued.
    - 503 Service Unavailable: If there is a database connection issue.
    """
    try:
        account = await store.find_account_by_email(identity.email)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable while loading profile of {identity.email}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable"},
        )

    if account is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "User not found"},
        )

    return UserResponse.from_account(account)
