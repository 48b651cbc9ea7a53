"""
Auth router for handling login and token refresh.
"""

import logfire

from fastapi import status, APIRouter, Depends
from fastapi.responses import JSONResponse

from typing import Annotated

from pymongo.errors import ConnectionFailure, ServerSelectionTimeoutError

from schema.security import LoginRequest, RefreshTokenRequest, TokenPair, TokenType

from security.exceptions import HashingError, InvalidCredentials, InvalidOrExpiredToken, SigningError
from security.helpers import (
    authenticate_account,
    get_password_hasher,
    get_session_issuer,
    get_token_codec,
)
from security.passwords import PasswordHasher
from security.sessions import SessionIssuer
from security.tokens import TokenCodec

from services.accounts import AccountStore, get_account_store

router = APIRouter(
    prefix="/api/auth",
    tags=["Auth"],
)


@router.post("/login", response_model=TokenPair)
async def login(
    payload: LoginRequest,
    store: Annotated[AccountStore, Depends(get_account_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
):
    """Login endpoint that returns both access and refresh tokens.

    ## Possible Errors
    - 401 Unauthorized: Unknown e-mail or wrong password. The two cases are not told apart.
    - 503 Service Unavailable: If there is a database connection issue.
    - 500 Internal Server Error: If the password check or the token signing failed.
    """
    try:
        account = await authenticate_account(store, hasher, payload.email, payload.password)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable during login for {payload.email}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable"},
        )
    except HashingError as e:
        logfire.error(f"Password check failed during login for {payload.email}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred during login. Please try again later."
            },
        )

    if account is None:
        logfire.info(f"Failed login attempt for {payload.email}")
        raise InvalidCredentials()

    try:
        tokens = issuer.issue_tokens(account)
    except SigningError as e:
        logfire.error(f"Fatal error occured during login: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred during login. Please try again later."
            },
        )

    logfire.info(f"User {account.email} logged in successfully")
    return tokens


@router.post("/refresh", response_model=TokenPair)
async def refresh_tokens(
    payload: RefreshTokenRequest,
    store: Annotated[AccountStore, Depends(get_account_store)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
):
    """Refresh endpoint that trades a refresh token for a new token pair.

    The account is read again, so name or admin changes made since the last login
    are reflected in the new tokens.

    ## Possible Errors
    - 401 Unauthorized: Invalid, expired or non-refresh token, or the account no longer exists.
    - 503 Service Unavailable: If there is a database connection issue.
    - 500 Internal Server Error: If the tokens could not be issued.
    """
    claims = codec.verify(payload.refresh_token)

    if claims is None or claims.token_type is not TokenType.REFRESH:
        raise InvalidOrExpiredToken()

    try:
        account = await store.find_account_by_email(claims.user.email)
    except (ConnectionFailure, ServerSelectionTimeoutError):
        logfire.error(f"Database unavailable during token refresh for {claims.user.email}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Service temporarily unavailable"},
        )

    if account is None:
        logfire.warning(f"Refresh token presented for deleted account {claims.user.email}")
        raise InvalidOrExpiredToken()

    try:
        tokens = issuer.issue_tokens(account)
    except SigningError as e:
        logfire.error(f"Fatal error occured during token refresh: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred. Please try again later."},
        )

    logfire.info(f"Tokens refreshed for user {account.email}")
    return tokens
