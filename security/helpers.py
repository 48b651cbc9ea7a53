"""Contains all security related FastAPI dependencies and helper functions
"""
import logfire

from fastapi import Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from typing import Annotated

from schema.security import TokenType, TokenUser

from services.accounts import AccountStore

from security.config import SecuritySettings, get_security_settings
from security.exceptions import Forbidden, InvalidOrExpiredToken, MissingToken
from security.passwords import PasswordHasher
from security.sessions import SessionIssuer
from security.tokens import TokenCodec

bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hasher(
    settings: Annotated[SecuritySettings, Depends(get_security_settings)],
) -> PasswordHasher:
    return PasswordHasher(
        settings.password_pepper.get_secret_value(),
        rounds=settings.password_hash_rounds,
    )


def get_token_codec(
    settings: Annotated[SecuritySettings, Depends(get_security_settings)],
) -> TokenCodec:
    return TokenCodec(settings)


def get_session_issuer(
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> SessionIssuer:
    return SessionIssuer(codec)


async def hash_password(hasher: PasswordHasher, password: str) -> str:
    """Hash `password` off the event loop.

    Raises:
        HashingError: Raised when the underlying hash function fails.
    """
    return await run_in_threadpool(hasher.hash, password)


async def authenticate_account(
    store: AccountStore, hasher: PasswordHasher, email: str, password: str
):
    """Authenticates an account by its e-mail and password.

    Args:
        store (AccountStore): Where accounts are looked up.
        hasher (PasswordHasher): Verifies the password against the stored hash.
        email (str): The e-mail of the account.
        password (str): The password of the account.

    Returns:
        Account | None: The account if authentication is successful, None otherwise.
    """
    account = await store.find_account_by_email(email)

    if account is None:
        # Keep the response time of unknown e-mails close to that of wrong passwords
        await run_in_threadpool(hasher.dummy_verify)
        return None
    if not await run_in_threadpool(hasher.verify, password, account.password):
        return None
    return account


async def get_current_identity(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> TokenUser:
    """Resolve the identity behind the bearer token of the request.

    The identity is also stored on `request.state.identity`.

    Raises:
        MissingToken: Raised when there is no bearer token.
        InvalidOrExpiredToken: Raised when the token is not a valid access token.

    Returns:
        TokenUser: The user claims of the verified access token.
    """
    if credentials is None or not credentials.credentials:
        raise MissingToken()

    claims = codec.verify(credentials.credentials)

    if claims is None:
        raise InvalidOrExpiredToken()

    # Refresh tokens only buy new access tokens, they never authorize API calls
    if claims.token_type is not TokenType.ACCESS:
        logfire.warning(f"Refresh token presented as bearer by {claims.user.email}")
        raise InvalidOrExpiredToken()

    request.state.identity = claims.user
    return claims.user


async def require_admin(
    identity: Annotated[TokenUser, Depends(get_current_identity)],
) -> TokenUser:
    """Get the current identity and make sure it belongs to an admin.

    Raises:
        Forbidden: Raised when the identity is not an admin.
    """
    if not identity.is_admin:
        logfire.warning(f"Non-admin {identity.email} denied access to an admin route")
        raise Forbidden()
    return identity
